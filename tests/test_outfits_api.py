"""
Tests for outfit endpoints
"""
OUTFITS = "/api/v1/outfits/"
PHOTO = ("look.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")
CLIP = ("spin.mp4", b"\x00\x00\x00 fake mp4", "video/mp4")


def create_outfit(client, headers, name="Date night"):
    response = client.post(OUTFITS, headers=headers, json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


def create_item(client, headers, name, category="Tops"):
    response = client.post("/api/v1/items/", headers=headers, data={"name": name, "category": category})
    assert response.status_code == 201, response.text
    return response.json()["item"]


class TestOutfits:

    def test_create_and_list(self, client, auth_headers):
        first = create_outfit(client, auth_headers, "Office")
        second = create_outfit(client, auth_headers, "Date night")

        outfits = client.get(OUTFITS, headers=auth_headers).json()
        assert [o["id"] for o in outfits] == [second["id"], first["id"]]
        assert outfits[0]["thumb_url"] is None
        assert outfits[0]["thumb_type"] is None

    def test_empty_name_rejected(self, client, auth_headers):
        assert client.post(OUTFITS, headers=auth_headers, json={"name": ""}).status_code == 422

    def test_other_users_outfit_not_found(self, client, auth_headers, other_headers):
        outfit = create_outfit(client, auth_headers)
        response = client.get(f"{OUTFITS}{outfit['id']}", headers=other_headers)
        assert response.status_code == 404
        assert client.get(OUTFITS, headers=other_headers).json() == []


class TestOutfitMedia:

    def test_gallery_order_and_thumbnail(self, client, auth_headers):
        outfit = create_outfit(client, auth_headers)
        url = f"{OUTFITS}{outfit['id']}/media"

        video = client.post(url, headers=auth_headers, files={"file": CLIP})
        assert video.status_code == 201
        assert video.json()["media_type"] == "video"
        assert video.json()["position"] == 0

        photo = client.post(url, headers=auth_headers, files={"file": PHOTO}).json()
        assert photo["media_type"] == "image"
        assert photo["position"] == 1

        gallery = client.get(url, headers=auth_headers).json()
        assert [m["position"] for m in gallery] == [0, 1]

        summary = client.get(OUTFITS, headers=auth_headers).json()[0]
        assert summary["thumb_url"] == "https://res.cloudinary.com/demo/video/upload/so_0/v1/1_spin.jpg"
        assert summary["thumb_type"] == "image"

    def test_upload_failure(self, client, auth_headers, media_host):
        outfit = create_outfit(client, auth_headers)
        media_host.fail = True
        response = client.post(f"{OUTFITS}{outfit['id']}/media", headers=auth_headers, files={"file": PHOTO})
        assert response.status_code == 502
        media_host.fail = False
        assert client.get(f"{OUTFITS}{outfit['id']}/media", headers=auth_headers).json() == []

    def test_media_for_missing_outfit(self, client, auth_headers):
        response = client.post(f"{OUTFITS}9999/media", headers=auth_headers, files={"file": PHOTO})
        assert response.status_code == 404


class TestOutfitItems:

    def test_date_night_with_black_jeans(self, client, auth_headers):
        outfit = create_outfit(client, auth_headers, "Date night")
        jeans = create_item(client, auth_headers, "Black Jeans", "Jeans")
        shirt = create_item(client, auth_headers, "Linen Shirt")
        url = f"{OUTFITS}{outfit['id']}/items/{jeans['id']}"

        response = client.post(url, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["item_ids"] == [jeans["id"]]

        detail = client.get(f"{OUTFITS}{outfit['id']}", headers=auth_headers).json()
        assert detail["outfit"]["name"] == "Date night"
        assert [i["name"] for i in detail["items"]] == ["Black Jeans"]
        assert [i["id"] for i in detail["available_items"]] == [shirt["id"]]

        assert client.get(url, headers=auth_headers).json()["name"] == "Black Jeans"

        response = client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["item_ids"] == []

        response = client.get(url, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "This item is not in that outfit."

    def test_adding_twice(self, client, auth_headers):
        outfit = create_outfit(client, auth_headers)
        jeans = create_item(client, auth_headers, "Black Jeans", "Jeans")
        url = f"{OUTFITS}{outfit['id']}/items/{jeans['id']}"

        assert client.post(url, headers=auth_headers).status_code == 201
        assert client.post(url, headers=auth_headers).status_code == 400

    def test_cannot_add_other_users_item(self, client, auth_headers, other_headers):
        outfit = create_outfit(client, auth_headers)
        theirs = create_item(client, other_headers, "Red Hoodie", "Hoodies")
        response = client.post(f"{OUTFITS}{outfit['id']}/items/{theirs['id']}", headers=auth_headers)
        assert response.status_code == 404

    def test_deleted_item_leaves_outfit(self, client, auth_headers):
        outfit = create_outfit(client, auth_headers)
        jeans = create_item(client, auth_headers, "Black Jeans", "Jeans")
        client.post(f"{OUTFITS}{outfit['id']}/items/{jeans['id']}", headers=auth_headers)

        client.delete(f"/api/v1/items/{jeans['id']}", headers=auth_headers)

        detail = client.get(f"{OUTFITS}{outfit['id']}", headers=auth_headers).json()
        assert detail["items"] == []
        assert detail["item_ids"] == []


class TestDeleteOutfit:

    def test_delete_keeps_items(self, client, auth_headers):
        outfit = create_outfit(client, auth_headers)
        jeans = create_item(client, auth_headers, "Black Jeans", "Jeans")
        client.post(f"{OUTFITS}{outfit['id']}/items/{jeans['id']}", headers=auth_headers)
        client.post(f"{OUTFITS}{outfit['id']}/media", headers=auth_headers, files={"file": PHOTO})

        response = client.delete(f"{OUTFITS}{outfit['id']}", headers=auth_headers)
        assert response.status_code == 200

        assert client.get(f"{OUTFITS}{outfit['id']}", headers=auth_headers).status_code == 404
        assert client.get(f"/api/v1/items/{jeans['id']}", headers=auth_headers).status_code == 200

    def test_delete_missing(self, client, auth_headers):
        assert client.delete(f"{OUTFITS}9999", headers=auth_headers).status_code == 404
