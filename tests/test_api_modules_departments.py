import pytest

PERMISSIONS = ("modules:read", "modules:write", "departments:read", "departments:write")


@pytest.fixture
def headers(create_user):
    _, headers = create_user(permissions=PERMISSIONS)
    return headers


def create_module(client, headers, **overrides):
    body = {"module_name": "Databases", "module_duration": "90 mins", "exam_type": "written", **overrides}
    res = client.post("/v1/modules", headers=headers, json=body)
    assert res.status_code == 201, res.text
    return res.json()


def create_department(client, headers, module_id, **overrides):
    body = {
        "department_name": "Computer Science",
        "staff_quantity": 12,
        "department_director": "Ada Lovelace",
        "module_info_id": module_id,
        **overrides,
    }
    return client.post("/v1/departments", headers=headers, json=body)


def test_module_crud(client, headers):
    module = create_module(client, headers)
    assert module["module_duration"] == "90 mins"
    assert module["version"] == 1

    res = client.patch(f"/v1/modules/{module['id']}", headers=headers, json={"exam_type": "oral"})
    assert res.status_code == 200
    updated = res.json()
    assert updated["exam_type"] == "oral"
    assert updated["version"] == 2

    res = client.patch(
        f"/v1/modules/{module['id']}",
        headers={**headers, "X-Expected-Version": "1"},
        json={"exam_type": "project"},
    )
    assert res.status_code == 409

    assert client.delete(f"/v1/modules/{module['id']}", headers=headers).status_code == 200
    assert client.get(f"/v1/modules/{module['id']}", headers=headers).status_code == 404


def test_module_validation(client, headers):
    res = client.post("/v1/modules", headers=headers, json={"module_name": "Algebra", "module_duration": -5})

    assert res.status_code == 422
    assert res.json() == {
        "error": {
            "module_duration": "must be a positive integer",
            "exam_type": "must be provided",
        }
    }


def test_module_list_filters(client, headers):
    create_module(client, headers, module_name="Databases", exam_type="written")
    create_module(client, headers, module_name="Distributed Databases", exam_type="oral")
    create_module(client, headers, module_name="Compilers", exam_type="written")

    res = client.get("/v1/modules?module_name=databases&sort=module_name", headers=headers)
    assert [m["module_name"] for m in res.json()["modules"]] == ["Databases", "Distributed Databases"]

    res = client.get("/v1/modules?exam_type=WRITTEN", headers=headers)
    assert res.json()["metadata"]["total_records"] == 2


def test_department_requires_existing_module(client, headers):
    res = create_department(client, headers, module_id=999)

    assert res.status_code == 422
    assert res.json() == {"error": {"module_info_id": "must reference an existing module"}}


def test_department_crud(client, headers):
    module = create_module(client, headers)

    res = create_department(client, headers, module_id=module["id"])
    assert res.status_code == 201, res.text
    department = res.json()
    assert res.headers["Location"] == f"/v1/departments/{department['id']}"
    assert department["module_info_id"] == module["id"]

    res = client.get(f"/v1/departments/{department['id']}", headers=headers)
    assert res.status_code == 200
    assert res.json()["department_director"] == "Ada Lovelace"

    res = client.patch(f"/v1/departments/{department['id']}", headers=headers, json={"staff_quantity": 15})
    assert res.status_code == 200
    assert res.json()["staff_quantity"] == 15
    assert res.json()["version"] == 2

    res = client.patch(f"/v1/departments/{department['id']}", headers=headers, json={"module_info_id": 999})
    assert res.status_code == 422

    res = client.get("/v1/departments?department_name=science", headers=headers)
    assert res.json()["metadata"]["total_records"] == 1

    # A module still referenced by a department cannot go away
    res = client.delete(f"/v1/modules/{module['id']}", headers=headers)
    assert res.status_code == 422

    assert client.delete(f"/v1/departments/{department['id']}", headers=headers).status_code == 200
    assert client.delete(f"/v1/modules/{module['id']}", headers=headers).status_code == 200


def test_department_validation(client, headers):
    res = create_department(client, headers, module_id=0, staff_quantity=0, department_director="")

    assert res.status_code == 422
    assert res.json() == {
        "error": {
            "staff_quantity": "must be provided",
            "department_director": "must be provided",
            "module_info_id": "must be provided",
        }
    }


def test_departments_need_their_own_permission(client, create_user):
    _, headers = create_user(permissions=("modules:read", "modules:write"))

    assert client.get("/v1/departments", headers=headers).status_code == 403
    assert client.get("/v1/modules", headers=headers).status_code == 200
