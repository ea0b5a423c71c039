from .registry import Registry

# Fleet/tire inventory catalog. Module order is the order the permissions
# page lists them in.
CATALOG = {
    "users": {
        "label": "Users",
        "permissions": [
            {"key": "user.view", "label": "View users", "action": "view"},
            {"key": "user.create", "label": "Create users", "action": "create"},
            {"key": "user.update", "label": "Update users", "action": "edit"},
            {"key": "user.edit", "label": "Edit user details", "action": "edit"},
            {"key": "user.delete", "label": "Delete users", "action": "delete"},
        ],
    },
    "roles": {
        "label": "Roles",
        "permissions": [
            {"key": "role.view", "label": "View roles", "action": "view"},
            {"key": "role.create", "label": "Create roles", "action": "create"},
            {"key": "role.update", "label": "Update roles", "action": "edit"},
            {"key": "role.delete", "label": "Delete roles", "action": "delete"},
        ],
    },
    "permissions": {
        "label": "Permissions",
        "permissions": [
            {"key": "permission.view", "label": "View permissions", "action": "view"},
            {"key": "permission.manage", "label": "Manage permissions"},
        ],
    },
    "settings": {
        "label": "Settings",
        "permissions": [
            {"key": "settings.view", "label": "View settings", "action": "view"},
            {"key": "settings.edit", "label": "Edit settings", "action": "edit"},
        ],
    },
    "vehicles": {
        "label": "Vehicles",
        "permissions": [
            {"key": "vehicle.view", "label": "View vehicles", "action": "view"},
            {"key": "vehicle.create", "label": "Register vehicles", "action": "create"},
            {"key": "vehicle.edit", "label": "Edit vehicles", "action": "edit"},
            {"key": "vehicle.delete", "label": "Remove vehicles", "action": "delete"},
        ],
    },
    "inventory": {
        "label": "Inventory",
        "permissions": [
            {"key": "inventory.view", "label": "View tire inventory", "action": "view"},
            {"key": "inventory.create", "label": "Add tires", "action": "create"},
            {"key": "inventory.edit", "label": "Move or service tires", "action": "edit"},
            {"key": "inventory.delete", "label": "Dispose tires", "action": "delete"},
        ],
    },
    "suppliers": {
        "label": "Suppliers",
        "permissions": [
            {"key": "supplier.view", "label": "View suppliers", "action": "view"},
            {"key": "supplier.create", "label": "Add suppliers", "action": "create"},
            {"key": "supplier.edit", "label": "Edit suppliers", "action": "edit"},
            {"key": "supplier.payment", "label": "Record supplier payments"},
        ],
    },
    "purchases": {
        "label": "Purchase orders",
        "permissions": [
            {"key": "po.view", "label": "View purchase orders", "action": "view"},
            {"key": "po.create", "label": "Create purchase orders", "action": "create"},
            {"key": "po.edit", "label": "Edit purchase orders", "action": "edit"},
            {"key": "po.approve", "label": "Approve purchase orders", "action": "approve"},
        ],
    },
    "grns": {
        "label": "Goods received notes",
        "permissions": [
            {"key": "grn.view", "label": "View GRNs", "action": "view"},
            {"key": "grn.create", "label": "Receive goods", "action": "create"},
            {"key": "grn.export", "label": "Export GRNs"},
        ],
    },
    "retreads": {
        "label": "Retreads",
        "permissions": [
            {"key": "retread.view", "label": "View retread orders", "action": "view"},
            {"key": "retread.create", "label": "Send tires for retread", "action": "create"},
            {"key": "retread.edit", "label": "Receive or return retreads", "action": "edit"},
            {"key": "retread.approve", "label": "Approve retread batches", "action": "approve"},
        ],
    },
}


def default_registry() -> Registry:
    return Registry.from_dict(CATALOG)
