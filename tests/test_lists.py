# ========== TEST LISTS ==========

def test_inbox_is_listed_first(client):
    client.post("/lists", json={"name": "Work"})
    data = client.get("/lists").json()
    assert data[0]["name"] == "Inbox"
    assert data[0]["is_default"] == True
    assert [l["name"] for l in data] == ["Inbox", "Work"]


def test_create_list(client):
    response = client.post("/lists", json={"name": "Courses", "icon": "🛒", "color": "green"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Courses"
    assert data["icon"] == "🛒"
    assert data["is_default"] == False
    assert data["created_at"] == data["updated_at"]


def test_create_list_blank_name(client):
    response = client.post("/lists", json={"name": ""})
    assert response.status_code == 400


def test_create_list_duplicate(client):
    client.post("/lists", json={"name": "Work"})
    response = client.post("/lists", json={"name": "Work"})
    assert response.status_code == 400


def test_get_list_not_found(client):
    assert client.get("/lists/nope").status_code == 404


def test_update_list(client):
    work = client.post("/lists", json={"name": "Work"}).json()
    response = client.put(f"/lists/{work['id']}", json={"color": "red"})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Work"
    assert data["color"] == "red"


def test_delete_inbox_is_refused(client):
    inbox = client.get("/lists").json()[0]
    response = client.delete(f"/lists/{inbox['id']}")
    assert response.status_code == 409
    assert client.get(f"/lists/{inbox['id']}").status_code == 200


def test_delete_list_removes_its_tasks(client):
    work = client.post("/lists", json={"name": "Work"}).json()
    task = client.post("/tasks", json={"name": "In work", "list_id": work["id"]}).json()

    assert client.delete(f"/lists/{work['id']}").status_code == 204
    assert client.get(f"/lists/{work['id']}").status_code == 404
    assert client.get(f"/tasks/{task['id']}").status_code == 404


def test_delete_unknown_list(client):
    assert client.delete("/lists/nope").status_code == 404
