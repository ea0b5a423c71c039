#!/usr/bin/env python3
"""
Flask Inventory Admin Example with pygate
Demonstrates route admission, guarded page sections and role management
backed by SQLite
"""

import asyncio
import secrets
from flask import (
    Flask,
    request,
    redirect,
    jsonify,
    render_template_string,
    make_response,
)
from pygate import (
    Actor,
    AdmissionRequest,
    MemoryIdentity,
    Outcome,
    Pygate,
    RedirectTo,
    Role,
    RouteAdmission,
    Settings,
    SQLite,
    SQLRoleStore,
    InvalidRole,
    ConfigurationError,
    default_registry,
)

app = Flask(__name__)
app.secret_key = secrets.token_urlsafe(32)

settings = Settings()
registry = default_registry()
roles = SQLRoleStore(registry, SQLite("inventory_example.db"))

# Demo directory; a real deployment resolves actors through HTTPIdentity
USERS = {
    "keeper": Actor(uid="1", name="Store keeper", role_uids=("store_keeper",)),
    "admin": Actor(uid="2", name="Administrator", role_uids=("administrator",)),
}
TOKENS = {}

COOKIE_SECURE = False  # Set to True in production with HTTPS


def current_actor():
    token = request.cookies.get(settings.token_cookie)
    return USERS.get(TOKENS.get(token)) if token else None


def current_gate():
    """A Pygate bound to the actor behind this request's cookie"""
    token = request.cookies.get(settings.token_cookie)
    actor = current_actor()
    pygate = Pygate(
        MemoryIdentity(actor, token), roles, registry=registry, settings=settings
    )
    asyncio.run(pygate.sessions.refresh())
    return pygate


routes = RouteAdmission.from_settings(settings)


@app.before_request
def admit():
    result = routes.admit(
        AdmissionRequest.from_cookies(request.path, request.cookies, settings.token_cookie)
    )
    if isinstance(result, RedirectTo):
        return redirect(result.path)
    return None


def section(rendered):
    if rendered.outcome is Outcome.CONTENT or rendered.outcome is Outcome.FALLBACK:
        return rendered.content
    if rendered.outcome is Outcome.DENIED_MESSAGE:
        return f'<p class="denied">{rendered.message}</p>'
    return ""


PAGE = """
<!DOCTYPE html>
<html>
<head>
    <title>pygate Inventory Example</title>
    <style>
        body { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }
        .denied { color: #dc3545; }
        section { margin: 20px 0; padding: 15px; border: 1px solid #ddd; border-radius: 5px; }
    </style>
</head>
<body>
    <h1>{{ title }}</h1>
    <p>Signed in as {{ name }} | <a href="/logout">Logout</a></p>
    {% for html in sections %}<section>{{ html | safe }}</section>{% endfor %}
</body>
</html>
"""


@app.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "GET":
        return (
            '<form method="post"><select name="user">'
            '<option value="keeper">Store keeper</option>'
            '<option value="admin">Administrator</option>'
            '</select><button>Login</button></form>'
        )

    user = request.form.get("user")
    if user not in USERS:
        return jsonify({"error": "Unknown user"}), 400

    token = secrets.token_urlsafe(24)
    TOKENS[token] = user
    response = make_response(redirect(settings.landing_path))
    response.set_cookie(
        settings.token_cookie,
        token,
        secure=COOKIE_SECURE,
        httponly=True,
        samesite="Lax",
    )
    return response


@app.route("/logout")
def logout():
    TOKENS.pop(request.cookies.get(settings.token_cookie), None)
    response = make_response(redirect(settings.login_path))
    response.set_cookie(settings.token_cookie, "", expires=0)
    return response


@app.route("/inventory")
def inventory():
    pygate = current_gate()
    gate = pygate.gate
    sections = [
        section(gate.guard("inventory.view", "<h3>Tires in stock</h3><p>128 tires</p>")),
        section(
            gate.guard(
                "grn.export",
                '<a href="/grns/export">Export GRNs</a>',
                fallback="<p>Exports are available to store keepers.</p>",
            )
        ),
        section(gate.guard_any(["po.view", "po.approve"], "<h3>Open purchase orders</h3>")),
        section(gate.guard_all(["settings.view", "settings.edit"], "<h3>Settings</h3>")),
    ]
    return render_template_string(
        PAGE, title="Inventory", name=getattr(current_actor(), "name", "nobody"),
        sections=sections,
    )


@app.route("/settings/roles", methods=["GET", "POST"])
def manage_roles():
    pygate = current_gate()

    if not pygate.has_permission("role.update"):
        return jsonify({"error": "Forbidden"}), 403

    if request.method == "GET":
        listed = asyncio.run(roles.list_roles())
        return jsonify([role.to_dict(exclude=["created_at", "updated_at"]) for role in listed])

    data = request.get_json() or {}
    try:
        role = asyncio.run(
            roles.grant(data.get("uid", ""), data.get("permissions", []))
        )
    except (InvalidRole, ConfigurationError) as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(role.to_dict(exclude=["created_at", "updated_at"]))


@app.route("/permissions")
def search_permissions():
    query = request.args.get("q", "")
    return jsonify(
        [
            {"module": module.label, "code": entry.code, "label": entry.label}
            for module, entry in registry.search(query)
        ]
    )


async def init_database():
    await roles.init_schema()
    for role in (
        Role(
            uid="store_keeper",
            name="Store keeper",
            permissions=["inventory.view", "grn.view", "grn.export", "po.view"],
        ),
        Role(
            uid="administrator",
            name="Administrator",
            permissions=sorted(registry.all_codes()),
            system=True,
        ),
    ):
        if await roles.get_role(role.uid) is None:
            await roles.create(role)


if __name__ == "__main__":
    asyncio.run(init_database())

    print("Flask Inventory Admin Example with pygate")
    print("=" * 50)
    print("1. / and protected pages redirect to /login without a session cookie")
    print("2. /inventory renders sections according to the signed in role")
    print("3. Administrators can grant codes through /settings/roles")
    print("4. Visit: http://localhost:5000")
    print("=" * 50)

    app.run(debug=True, host="0.0.0.0", port=5000)
