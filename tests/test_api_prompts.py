from sqlalchemy.exc import OperationalError

from scripts.seed_image_prompts import NAMES
from services import crud
from services.template_resolver import DEFAULT_IMAGE_PROMPTS


def new_prompt(client, name, content_type="review", is_default=False):
    r = client.post("/prompts", json={
        "name": name, "content_type": content_type, "template": f"{name} 템플릿", "is_default": is_default,
    })
    assert r.status_code == 201, f"status={r.status_code} body={r.text}"
    return r.json()


def defaults(client, content_type):
    return [p["id"] for p in client.get("/prompts").json() if p["content_type"] == content_type and p["is_default"]]


def test_new_default_replaces_previous_default(client):
    a = new_prompt(client, "A", is_default=True)
    b = new_prompt(client, "B", is_default=True)
    other = new_prompt(client, "C", content_type="tutorial", is_default=True)

    assert defaults(client, "review") == [b["id"]]
    assert defaults(client, "tutorial") == [other["id"]]
    assert client.get(f"/prompts/{a['id']}").json()["is_default"] is False


def test_promoting_on_update_keeps_a_single_default(client):
    a = new_prompt(client, "A", is_default=True)
    b = new_prompt(client, "B")

    r = client.put(f"/prompts/{b['id']}", json={"is_default": True})
    assert r.status_code == 200
    assert r.json()["is_default"] is True
    assert defaults(client, "review") == [b["id"]]

    # editing the current default without touching the flag keeps it
    client.put(f"/prompts/{b['id']}", json={"template": "수정된 템플릿"})
    assert defaults(client, "review") == [b["id"]]
    assert client.get(f"/prompts/{a['id']}").json()["is_default"] is False


def test_prompt_crud(client):
    p = new_prompt(client, "리뷰용", content_type="comparison")
    assert client.get(f"/prompts/{p['id']}").json()["template"] == "리뷰용 템플릿"
    assert client.delete(f"/prompts/{p['id']}").status_code == 204
    assert client.get(f"/prompts/{p['id']}").status_code == 404

    r = client.post("/prompts", json={"name": "x", "content_type": "poem", "template": "t"})
    assert r.status_code == 400


def test_image_prompts_seed_list_and_update(client, session_factory):
    with session_factory() as db:
        added = crud.seed_image_prompts(db, DEFAULT_IMAGE_PROMPTS, NAMES)
        assert added == len(DEFAULT_IMAGE_PROMPTS)
        # second run never overwrites
        assert crud.seed_image_prompts(db, DEFAULT_IMAGE_PROMPTS, NAMES) == 0

    rows = client.get("/image-prompts").json()
    assert len(rows) == len(DEFAULT_IMAGE_PROMPTS)
    assert [(r["category"], r["key"]) for r in rows] == sorted((r["category"], r["key"]) for r in rows)

    style = next(r for r in rows if (r["category"], r["key"]) == ("style", "minimal"))
    assert style["name"] == "미니멀"

    r = client.put(f"/image-prompts/{style['id']}", json={"prompt": "흑백 선화", "is_active": False})
    assert r.status_code == 200, f"status={r.status_code} body={r.text}"
    assert r.json()["prompt"] == "흑백 선화"
    assert r.json()["is_active"] is False

    with session_factory() as db:
        active = crud.active_image_prompts(db)
        assert ("style", "minimal") not in {(p.category, p.key) for p in active}


def test_image_prompt_missing_is_404(client):
    assert client.get("/image-prompts/999").status_code == 404
    r = client.put("/image-prompts/999", json={"prompt": "x"})
    assert r.status_code == 404
    assert r.json() == {"error": "Image prompt not found"}


def test_load_active_prompts_survives_storage_errors():
    def broken_factory():
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    assert crud.load_active_image_prompts(broken_factory) == []
