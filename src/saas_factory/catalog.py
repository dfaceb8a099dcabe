"""Built-in categories and preset templates."""

SYSTEM_CATEGORIES: list[dict] = [
    {"id": "crm", "name": "CRM", "description": "Customers and sales", "color": "#3B82F6"},
    {"id": "cms", "name": "CMS", "description": "Blogs and articles", "color": "#10B981"},
    {
        "id": "todo",
        "name": "Task management",
        "description": "Todos and projects",
        "color": "#F59E0B",
    },
    {
        "id": "inventory",
        "name": "Inventory",
        "description": "Products and stock",
        "color": "#8B5CF6",
    },
    {"id": "form", "name": "Forms & surveys", "description": "Data collection", "color": "#EF4444"},
    {
        "id": "e-commerce",
        "name": "E-commerce",
        "description": "Stores and payments",
        "color": "#06B6D4",
    },
    {
        "id": "dashboard",
        "name": "Dashboard",
        "description": "Visualization and analytics",
        "color": "#84CC16",
    },
    {
        "id": "landing-page",
        "name": "Landing page",
        "description": "Marketing pages",
        "color": "#F97316",
    },
    {"id": "blog", "name": "Blog", "description": "Posts and content", "color": "#6366F1"},
    {
        "id": "portfolio",
        "name": "Portfolio",
        "description": "Showcases and personal sites",
        "color": "#EC4899",
    },
    {"id": "other", "name": "Other", "description": "Custom applications", "color": "#6B7280"},
]

SYSTEM_CATEGORY_IDS = frozenset(c["id"] for c in SYSTEM_CATEGORIES)

PRESET_TEMPLATES: dict[str, dict] = {
    "template-landing-page": {
        "name": "Landing page",
        "description": "Hero, features, pricing and contact form.",
        "category": "landing-page",
        "tags": ["marketing", "business", "responsive"],
        "features": (
            "Hero section\nFeature highlights\nPricing table\nContact form\n"
            "Responsive design\nSEO"
        ),
        "design_preferences": "Modern and clean\nBrand colors\nAnimations\nMobile first",
        "tech_requirements": "Next.js\nTypeScript\nTailwind CSS\nFramer Motion",
    },
    "template-saas-dashboard": {
        "name": "SaaS dashboard",
        "description": "Admin dashboard with auth, charts and user management.",
        "category": "dashboard",
        "tags": ["saas", "admin", "analytics"],
        "features": (
            "User authentication\nCharts\nUser management\nSettings\n"
            "Notifications\nDark mode"
        ),
        "design_preferences": "Professional UI\nData-first layout\nAccessible",
        "tech_requirements": "Next.js\nTypeScript\nTailwind CSS\nChart.js",
    },
    "template-ecommerce-store": {
        "name": "E-commerce store",
        "description": "Catalog, cart, checkout and order management.",
        "category": "e-commerce",
        "tags": ["shopping", "payment", "inventory"],
        "features": (
            "Product catalog\nShopping cart\nStripe checkout\nOrder management\n"
            "Inventory\nReviews"
        ),
        "design_preferences": "Product-focused layout\nTrustworthy look\nFast checkout",
        "tech_requirements": "Next.js\nTypeScript\nTailwind CSS\nStripe",
    },
    "template-blog-cms": {
        "name": "Blog CMS",
        "description": "Blog with article editor, categories and comments.",
        "category": "blog",
        "tags": ["content", "cms", "seo"],
        "features": (
            "Write and edit posts\nCategories and tags\nComments\nSEO\nSearch\nRSS feed"
        ),
        "design_preferences": "Readable typography\nMinimal layout",
        "tech_requirements": "Next.js\nTypeScript\nMDX",
    },
    "template-portfolio": {
        "name": "Portfolio",
        "description": "Gallery, profile and contact page for creators.",
        "category": "portfolio",
        "tags": ["creative", "gallery", "personal"],
        "features": (
            "Work gallery\nProfile\nSkills and experience\nContact form\nBlog\nSocial links"
        ),
        "design_preferences": "Creative design\nLarge imagery",
        "tech_requirements": "Next.js\nTypeScript\nTailwind CSS",
    },
}
