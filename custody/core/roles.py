ROLE_ADMIN = "Admin"
ROLE_TEAM_LEAD = "TeamLead"
ROLE_EMPLOYEE = "Employee"

ROLES = [ROLE_ADMIN, ROLE_TEAM_LEAD, ROLE_EMPLOYEE]

# roles allowed on user management and sheet deletion
MANAGER_ROLES = [ROLE_ADMIN, ROLE_TEAM_LEAD]


def is_manager(role: str) -> bool:
    return role in MANAGER_ROLES
