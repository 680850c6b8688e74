# ========== TEST LABELS ==========

def test_create_label(client):
    response = client.post("/labels", json={"name": "Urgent", "color": "red"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Urgent"
    assert data["color"] == "red"
    assert data["icon"] == "🏷️"


def test_create_label_blank_name(client):
    assert client.post("/labels", json={"name": "  "}).status_code == 400


def test_labels_sorted_by_name(client):
    for name in ["zeta", "alpha", "mid"]:
        client.post("/labels", json={"name": name})
    assert [l["name"] for l in client.get("/labels").json()] == ["alpha", "mid", "zeta"]


def test_update_label(client):
    label = client.post("/labels", json={"name": "Home"}).json()
    data = client.put(f"/labels/{label['id']}", json={"name": "House"}).json()
    assert data["name"] == "House"
    assert data["color"] == label["color"]


def test_update_unknown_label(client):
    assert client.put("/labels/nope", json={"name": "X"}).status_code == 404


def test_delete_label_keeps_task(client):
    label = client.post("/labels", json={"name": "Home"}).json()
    task = client.post("/tasks", json={"name": "Tagged", "labels": [label["id"]]}).json()

    assert client.delete(f"/labels/{label['id']}").status_code == 204

    data = client.get(f"/tasks/{task['id']}").json()
    assert data["labels"] == []
    assert client.get(f"/labels/{label['id']}").status_code == 404
