"""Seed data served in demo mode."""

from datetime import UTC, datetime

DEMO_USER_ID = "demo-user-id"
DEMO_USER_EMAIL = "demo@saas-factory.com"
DEMO_PROJECT_PREFIX = "demo-project-"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=UTC)


DEMO_PROJECTS: list[dict] = [
    {
        "id": "demo-project-1",
        "user_id": DEMO_USER_ID,
        "title": "Salon Booking Manager",
        "description": (
            "Customer and appointment management for a small hair salon. Record visit "
            "history and treatments, and manage the next booking. Simple, easy UI."
        ),
        "category": "crm",
        "features": (
            "- Register, edit and search customers\n"
            "- Visit history\n"
            "- Appointments (date, staff, menu)\n"
            "- Sales reports\n"
            "- Email notifications to customers"
        ),
        "design_preferences": (
            "- Clean and simple\n- Blue and white palette\n- Large buttons, readable fonts"
        ),
        "tech_requirements": "- CSV export\n- Data backups",
        "status": "completed",
        "generated_code": {
            "components": [
                "CustomerList",
                "CustomerForm",
                "AppointmentCalendar",
                "ServiceHistory",
                "Dashboard",
            ],
            "pages": ["Customers", "Appointments", "Dashboard", "Settings"],
            "api_routes": ["/api/customers", "/api/appointments", "/api/services", "/api/reports"],
            "database_schema": (
                "CREATE TABLE customers (\n"
                "  id UUID PRIMARY KEY,\n"
                "  name VARCHAR(255) NOT NULL,\n"
                "  phone VARCHAR(20),\n"
                "  email VARCHAR(255),\n"
                "  notes TEXT,\n"
                "  created_at TIMESTAMPTZ DEFAULT NOW()\n"
                ");\n"
            ),
            "package_json": {
                "name": "salon-management-system",
                "version": "1.0.0",
                "dependencies": {"next": "^14.0.0", "react": "^18.0.0", "react-dom": "^18.0.0"},
            },
            "file_structure": [
                {
                    "path": "components/CustomerList.tsx",
                    "content": 'import React from "react";\n',
                    "type": "file",
                },
                {
                    "path": "pages/dashboard.tsx",
                    "content": 'import React from "react";\n',
                    "type": "file",
                },
            ],
        },
        "created_at": _ts("2024-11-15T10:00:00"),
        "updated_at": _ts("2024-11-15T10:30:00"),
        "completed_at": _ts("2024-11-15T10:30:00"),
    },
    {
        "id": "demo-project-2",
        "user_id": DEMO_USER_ID,
        "title": "Team Task Tracker",
        "description": "Task management for teams with per-project boards and progress charts.",
        "category": "todo",
        "features": "- Projects\n- Tasks with priority and due dates\n- Progress charts",
        "design_preferences": "- Kanban board\n- Dark mode",
        "tech_requirements": "- Realtime sync\n- Notifications",
        "status": "generating",
        "created_at": _ts("2024-11-20T09:00:00"),
        "updated_at": _ts("2024-11-20T09:15:00"),
    },
    {
        "id": "demo-project-3",
        "user_id": DEMO_USER_ID,
        "title": "Blog CMS",
        "description": "A simple blog engine to write, edit and publish articles.",
        "category": "cms",
        "features": "- Articles\n- Categories\n- Tags\n- Comments",
        "design_preferences": "- Minimal\n- Readable typography",
        "tech_requirements": "- SEO\n- RSS feed",
        "status": "draft",
        "created_at": _ts("2024-11-22T14:30:00"),
        "updated_at": _ts("2024-11-22T14:30:00"),
    },
]

DEMO_GENERATION_LOGS: list[dict] = [
    {
        "project_id": "demo-project-1",
        "step": "analyze",
        "status": "completed",
        "message": "Analyzed project requirements",
        "details": {"complexity_score": 7},
        "started_at": _ts("2024-11-15T10:00:00"),
        "completed_at": _ts("2024-11-15T10:05:00"),
    },
    {
        "project_id": "demo-project-1",
        "step": "generate_code",
        "status": "completed",
        "message": "Generated application code",
        "started_at": _ts("2024-11-15T10:05:00"),
        "completed_at": _ts("2024-11-15T10:20:00"),
    },
    {
        "project_id": "demo-project-1",
        "step": "optimize",
        "status": "completed",
        "message": "Optimized generated code",
        "started_at": _ts("2024-11-15T10:20:00"),
        "completed_at": _ts("2024-11-15T10:25:00"),
    },
    {
        "project_id": "demo-project-1",
        "step": "finalize",
        "status": "completed",
        "message": "Project generation completed",
        "details": {"total_files": 12},
        "started_at": _ts("2024-11-15T10:25:00"),
        "completed_at": _ts("2024-11-15T10:30:00"),
    },
    {
        "project_id": "demo-project-2",
        "step": "analyze",
        "status": "completed",
        "message": "Analyzed project requirements",
        "started_at": _ts("2024-11-20T09:00:00"),
        "completed_at": _ts("2024-11-20T09:05:00"),
    },
    {
        "project_id": "demo-project-2",
        "step": "generate_code",
        "status": "in_progress",
        "message": "Generating application code",
        "started_at": _ts("2024-11-20T09:05:00"),
    },
]

DEMO_COLLABORATORS: list[dict] = [
    {
        "project_id": "demo-project-1",
        "user_email": "designer@saas-factory.com",
        "role": "editor",
        "invited_by": DEMO_USER_ID,
        "joined_at": _ts("2024-11-16T09:00:00"),
        "created_at": _ts("2024-11-16T09:00:00"),
        "updated_at": _ts("2024-11-16T09:00:00"),
    },
]
