def test_routes_registered(client):
    paths = {route.path for route in client.app.routes}
    assert {"/", "/health", "/version"} <= paths


def test_root_is_get_only(client):
    root = next(route for route in client.app.routes if route.path == "/")
    assert root.methods == {"GET"}
