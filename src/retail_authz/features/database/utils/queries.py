"""SQL statements used by the authorization repositories.

Every statement is tenant-scoped through a bound ``tenant_id`` parameter.
Tenant and user identifiers are stored as TEXT; entity ids are SERIAL.
"""

# Roles
ROLES_BY_TENANT = """
    SELECT id, name, parent_role_id, tenant_id
    FROM roles
    WHERE tenant_id = $1
"""

ROLE_INSERT = """
    INSERT INTO roles (name, parent_role_id, tenant_id)
    VALUES ($1, $2, $3)
    RETURNING id, name, parent_role_id, tenant_id
"""

ROLE_SET_PARENT = """
    UPDATE roles
    SET parent_role_id = $2
    WHERE id = $1 AND tenant_id = $3
    RETURNING id, name, parent_role_id, tenant_id
"""

# User role assignments
USER_ROLES_BY_USER = """
    SELECT id, user_id, role_id, org_unit_id, tenant_id, valid_from, valid_to
    FROM user_roles
    WHERE user_id = $1 AND tenant_id = $2
"""

USER_ROLES_BY_USER_AND_ORG_UNITS = """
    SELECT id, user_id, role_id, org_unit_id, tenant_id, valid_from, valid_to
    FROM user_roles
    WHERE user_id = $1 AND tenant_id = $2 AND org_unit_id = ANY($3::int[])
"""

USER_ROLE_INSERT = """
    INSERT INTO user_roles (user_id, role_id, org_unit_id, tenant_id, valid_from, valid_to)
    VALUES ($1, $2, $3, $4, $5, $6)
    RETURNING id, user_id, role_id, org_unit_id, tenant_id, valid_from, valid_to
"""

USER_ROLE_DELETE = """
    DELETE FROM user_roles
    WHERE user_id = $1 AND role_id = $2 AND tenant_id = $3
      AND org_unit_id IS NOT DISTINCT FROM $4
"""

# Org units
ORG_UNITS_BY_TENANT = """
    SELECT id, name, parent_org_unit_id, tenant_id
    FROM org_units
    WHERE tenant_id = $1
"""

USER_ORG_UNITS_BY_USER = """
    SELECT user_id, org_unit_id, tenant_id
    FROM user_org_units
    WHERE user_id = $1 AND tenant_id = $2
"""

# Permissions
PERMISSIONS_BY_TENANT = """
    SELECT id, name, resource, action, description, tenant_id
    FROM permissions
    WHERE tenant_id = $1
    ORDER BY name
"""

PERMISSION_NAMES_FOR_ROLES = """
    SELECT DISTINCT p.name
    FROM role_permissions rp
    JOIN permissions p ON p.id = rp.permission_id AND p.tenant_id = rp.tenant_id
    WHERE rp.tenant_id = $1 AND rp.role_id = ANY($2::int[])
"""

PERMISSION_INSERT = """
    INSERT INTO permissions (name, resource, action, description, tenant_id)
    VALUES ($1, $2, $3, $4, $5)
    RETURNING id, name, resource, action, description, tenant_id
"""

ROLE_PERMISSION_INSERT = """
    INSERT INTO role_permissions (role_id, permission_id, tenant_id)
    SELECT r.id, p.id, r.tenant_id
    FROM roles r
    JOIN permissions p ON p.id = $2 AND p.tenant_id = r.tenant_id
    WHERE r.id = $1 AND r.tenant_id = $3
    ON CONFLICT (role_id, permission_id) DO NOTHING
"""

ROLE_PERMISSION_DELETE = """
    DELETE FROM role_permissions
    WHERE role_id = $1 AND permission_id = $2 AND tenant_id = $3
"""

# Audit
AUDIT_LOG_INSERT = """
    INSERT INTO audit_log (
        event_id, tenant_id, user_id, action, resource, resource_id,
        outcome, reason, details, ip, user_agent, created_at
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9::jsonb, $10, $11, $12)
"""
