from database.models import RoleName
from conftest import API_KEY, bearer, get_role, make_user


def find_permission(client, headers, method, path):
    permissions = client.get("/permissions", params={"limit": 100}, headers=headers).json()["permissions"]
    return next(p for p in permissions if p["method"] == method and p["path"] == path)


class TestPermissions:
    def test_seeded_from_routes_with_modules(self, client, admin_headers):
        permission = find_permission(client, admin_headers, "POST", "/manage-product/products")

        assert permission["module"] == "MANAGE-PRODUCT"
        assert permission["name"] == "POST /manage-product/products"

        permission = find_permission(client, admin_headers, "PUT", "/roles/{role_id}")
        assert permission["module"] == "ROLES"

    def test_module_filter(self, client, admin_headers):
        response = client.get("/permissions", params={"module": "roles"}, headers=admin_headers)

        assert response.status_code == 200
        assert {p["module"] for p in response.json()["permissions"]} == {"ROLES"}

    def test_create_derives_module_and_rejects_duplicates(self, client, admin_headers):
        payload = {"path": "/reports/{report_id}", "method": "PATCH"}

        response = client.post("/permissions", json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["module"] == "REPORTS"

        response = client.post("/permissions", json=payload, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["detail"] == "Permission already exists."

    def test_update_rederives_module(self, client, admin_headers):
        created = client.post("/permissions", json={"path": "/reports", "method": "GET"}, headers=admin_headers).json()

        response = client.put(
            f"/permissions/{created['id']}",
            json={"path": "/invoices"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["module"] == "INVOICES"
        assert response.json()["method"] == "GET"

    def test_soft_delete(self, client, admin_headers):
        created = client.post("/permissions", json={"path": "/reports", "method": "GET"}, headers=admin_headers).json()

        assert client.delete(f"/permissions/{created['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/permissions/{created['id']}", headers=admin_headers).status_code == 404

        # The route is free again once the old row is soft-deleted
        response = client.post("/permissions", json={"path": "/reports", "method": "GET"}, headers=admin_headers)
        assert response.status_code == 201

    def test_sync_removes_permissions_without_route(self, client, admin_headers):
        client.post("/permissions", json={"path": "/reports", "method": "GET"}, headers=admin_headers)

        response = client.post("/permissions/sync", headers={"x-api-key": API_KEY})

        assert response.json()["deleted"] == 1
        assert response.json()["added"] == 0


class TestRoles:
    def test_custom_role_end_to_end(self, client, session, admin_headers):
        list_users = find_permission(client, admin_headers, "GET", "/users")

        response = client.post(
            "/roles",
            json={"name": "auditor", "permission_ids": [list_users["id"]]},
            headers=admin_headers,
        )
        assert response.status_code == 201
        role = response.json()
        assert [p["id"] for p in role["permissions"]] == [list_users["id"]]

        auditor = get_role(session, "auditor")
        headers = bearer(make_user(session, auditor, "auditor@example.com"), auditor)

        assert client.get("/users", headers=headers).status_code == 200
        assert client.get("/roles", headers=headers).status_code == 403

        # Permission removed from the role: denied on the next request
        response = client.put(f"/roles/{role['id']}", json={"permission_ids": []}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["permissions"] == []
        assert client.get("/users", headers=headers).status_code == 403

    def test_deleted_permission_stops_matching(self, client, session, admin_headers):
        created = client.post("/permissions", json={"path": "/users", "method": "PATCH"}, headers=admin_headers).json()
        list_users = find_permission(client, admin_headers, "GET", "/users")
        role = client.post(
            "/roles",
            json={"name": "support", "permission_ids": [created["id"], list_users["id"]]},
            headers=admin_headers,
        ).json()

        client.delete(f"/permissions/{list_users['id']}", headers=admin_headers)

        detail = client.get(f"/roles/{role['id']}", headers=admin_headers).json()
        assert [p["id"] for p in detail["permissions"]] == [created["id"]]

    def test_duplicate_name_and_unknown_permission(self, client, admin_headers):
        response = client.post("/roles", json={"name": RoleName.SELLER.value}, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["detail"] == "Role already exists."

        response = client.post("/roles", json={"name": "ghost", "permission_ids": ["missing"]}, headers=admin_headers)
        assert response.status_code == 422

    def test_builtin_roles_are_protected(self, client, admin_headers):
        roles = client.get("/roles", headers=admin_headers).json()["roles"]
        seller = next(r for r in roles if r["name"] == RoleName.SELLER.value)

        response = client.put(f"/roles/{seller['id']}", json={"description": "x"}, headers=admin_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "You cannot modify this role."
        assert client.delete(f"/roles/{seller['id']}", headers=admin_headers).status_code == 403

    def test_soft_delete(self, client, admin_headers):
        role = client.post("/roles", json={"name": "temporary"}, headers=admin_headers).json()

        assert client.delete(f"/roles/{role['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/roles/{role['id']}", headers=admin_headers).status_code == 404
        names = [r["name"] for r in client.get("/roles", headers=admin_headers).json()["roles"]]
        assert "temporary" not in names

        # Name can be reused after deletion
        assert client.post("/roles", json={"name": "temporary"}, headers=admin_headers).status_code == 201
