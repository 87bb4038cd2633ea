import pytest
from httpx import AsyncClient

from socialfeed.db.client import DataClient
from socialfeed.models import Comment, Post, PostLike
from socialfeed.services.composer_service import PostComposer
from socialfeed.services.storage_service import ImageUpload, StorageService
from socialfeed.utils.exceptions import DataAccessError, StorageError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.mark.asyncio
async def test_create_text_post(test_client: AsyncClient, data_client: DataClient, alice, auth_headers):
    response = await test_client.post(
        "/api/v1/posts",
        data={"content": "  This is a test post  "},
        headers=auth_headers(alice)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["content"] == "This is a test post"
    assert data["user_id"] == alice.user_id
    assert data["image_url"] is None
    assert data["likes_count"] == 0
    assert await data_client.count(Post) == 1


@pytest.mark.asyncio
async def test_create_post_with_image(
    test_client: AsyncClient, storage: StorageService, alice, auth_headers
):
    response = await test_client.post(
        "/api/v1/posts",
        data={"content": ""},
        files={"image": ("cat.png", PNG, "image/png")},
        headers=auth_headers(alice)
    )

    assert response.status_code == 201
    image_url = response.json()["image_url"]
    assert image_url.startswith(f"http://testserver/storage/chat-images/{alice.user_id}-")
    assert image_url.endswith(".png")

    stored = list(storage.bucket_dir.iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == PNG


@pytest.mark.asyncio
async def test_empty_submission_is_rejected_without_writes(
    test_client: AsyncClient, data_client: DataClient, storage: StorageService, alice, auth_headers
):
    response = await test_client.post(
        "/api/v1/posts",
        data={"content": "   "},
        headers=auth_headers(alice)
    )

    assert response.status_code == 400
    assert await data_client.count(Post) == 0
    assert not storage.bucket_dir.exists()


@pytest.mark.asyncio
async def test_failed_upload_aborts_the_post(
    test_client: AsyncClient, data_client: DataClient, storage: StorageService, alice, auth_headers, monkeypatch
):
    async def failing_upload(name, data):
        raise StorageError("bucket unavailable")

    monkeypatch.setattr(storage, "upload", failing_upload)

    response = await test_client.post(
        "/api/v1/posts",
        data={"content": "with picture"},
        files={"image": ("cat.png", PNG, "image/png")},
        headers=auth_headers(alice)
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to upload image"
    assert await data_client.count(Post) == 0


@pytest.mark.asyncio
async def test_disallowed_image_type(test_client: AsyncClient, alice, auth_headers):
    response = await test_client.post(
        "/api/v1/posts",
        data={"content": "script"},
        files={"image": ("run.sh", b"echo hi", "text/x-sh")},
        headers=auth_headers(alice)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_post_requires_session(test_client: AsyncClient):
    response = await test_client.post("/api/v1/posts", data={"content": "anon"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_edit_changes_only_content(
    test_client: AsyncClient, data_client: DataClient, alice, make_post, auth_headers
):
    post = await make_post(alice, "before", image_url="http://testserver/storage/chat-images/a.png")
    created_at = post.created_at

    response = await test_client.patch(
        f"/api/v1/posts/{post.id}",
        json={"content": " after "},
        headers=auth_headers(alice)
    )

    assert response.status_code == 200
    updated = await data_client.get(Post, id=post.id)
    assert updated.content == "after"
    assert updated.image_url == "http://testserver/storage/chat-images/a.png"
    assert updated.created_at == created_at


@pytest.mark.asyncio
async def test_edit_rejects_empty_content(test_client: AsyncClient, alice, make_post, auth_headers):
    post = await make_post(alice, "keep me")

    response = await test_client.patch(
        f"/api/v1/posts/{post.id}",
        json={"content": "  "},
        headers=auth_headers(alice)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_only_owner_can_edit_or_delete(test_client: AsyncClient, alice, bob, make_post, auth_headers):
    post = await make_post(alice, "mine")

    edit = await test_client.patch(
        f"/api/v1/posts/{post.id}",
        json={"content": "yours now"},
        headers=auth_headers(bob)
    )
    delete = await test_client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(bob))

    assert edit.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_deleted_post_leaves_the_feed_with_its_likes_and_comments(
    test_client: AsyncClient, data_client: DataClient, alice, bob, make_post, auth_headers
):
    doomed = await make_post(alice, "doomed", minutes_ago=5)
    kept = await make_post(alice, "kept")
    await data_client.insert(PostLike, post_id=doomed.id, user_id=bob.user_id)
    await data_client.insert(Comment, post_id=doomed.id, author_id=bob.user_id, content="nice")

    response = await test_client.delete(f"/api/v1/posts/{doomed.id}", headers=auth_headers(alice))
    assert response.status_code == 200

    feed = (await test_client.get("/api/v1/feed")).json()["posts"]
    assert [post["id"] for post in feed] == [kept.id]
    assert await data_client.count(PostLike, post_id=doomed.id) == 0
    assert await data_client.count(Comment, post_id=doomed.id) == 0


@pytest.mark.asyncio
async def test_object_name_uses_user_and_millis(storage: StorageService):
    upload = ImageUpload(filename="Photo.JPG", data=PNG, content_type="image/jpeg")

    assert storage.object_name("user-alice", upload, now=1700000000.5) == "user-alice-1700000000500.jpg"

    await storage.upload("user-alice-1.jpg", PNG)
    with pytest.raises(StorageError):
        await storage.upload("user-alice-1.jpg", PNG)
    assert await storage.remove("user-alice-1.jpg") is True
    assert await storage.remove("user-alice-1.jpg") is False


@pytest.mark.asyncio
async def test_failed_insert_removes_uploaded_image(
    data_client: DataClient, storage: StorageService, alice, make_session, monkeypatch
):
    async def failing_insert(model, commit=True, **values):
        raise DataAccessError("insert on posts failed")

    monkeypatch.setattr(data_client, "insert", failing_insert)
    composer = PostComposer(data_client, storage)
    upload = ImageUpload(filename="cat.png", data=PNG, content_type="image/png")

    with pytest.raises(DataAccessError):
        await composer.submit(make_session(alice), "caption", upload)

    assert list(storage.bucket_dir.iterdir()) == []
