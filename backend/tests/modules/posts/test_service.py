"""Tests for PostService."""

import pytest

from shared.storage import StorageError
from modules.posts.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    NoUpdatesProvidedError,
    PostAccessDeniedError,
    PostFileNotFoundError,
    PostNotFoundError,
    TextExtractionNotFoundError,
    UnsupportedFileTypeError,
)
from modules.posts.interfaces import IPostService
from modules.posts.models import PostFilter, PostUploadRequest, UpdatePostRequest
from modules.users.exceptions import UserNotFoundError


@pytest.fixture
def upload_request() -> PostUploadRequest:
    return PostUploadRequest(
        title="Data structures notes",
        description="Chapter 3",
        program="CS",
        course="cs201",
        resource_type="notes",
    )


def test_implements_interface(post_service):
    assert isinstance(post_service, IPostService)


class TestUpload:
    @pytest.mark.asyncio
    async def test_stores_file_and_creates_post(
        self, post_service, storage, make_user, upload_request
    ):
        alice = make_user("alice")
        view = await post_service.upload_post(
            alice.id, b"%PDF-1.7", "application/pdf", "notes.pdf", upload_request
        )

        assert view.user_id == alice.id
        assert view.title == "Data structures notes"
        assert view.category.program == "CS"
        assert view.file_name == "notes.pdf"
        assert view.file_type == "application/pdf"
        assert view.likes == []
        assert view.author.username == "alice"
        assert storage.objects[view.file_key][0] == b"%PDF-1.7"

    @pytest.mark.asyncio
    async def test_empty_file(self, post_service, make_user, upload_request):
        alice = make_user("alice")
        with pytest.raises(EmptyFileError):
            await post_service.upload_post(alice.id, b"", "application/pdf", "a.pdf", upload_request)

    @pytest.mark.asyncio
    async def test_file_over_limit(self, post_service, settings, make_user, upload_request):
        alice = make_user("alice")
        content = b"x" * (settings.max_upload_bytes + 1)
        with pytest.raises(FileTooLargeError, match="10MB"):
            await post_service.upload_post(alice.id, content, "application/pdf", "a.pdf", upload_request)

    @pytest.mark.asyncio
    async def test_unsupported_type(self, post_service, storage, make_user, upload_request):
        alice = make_user("alice")
        with pytest.raises(UnsupportedFileTypeError):
            await post_service.upload_post(alice.id, b"MZ", "application/x-msdownload", "a.exe", upload_request)
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_unknown_owner(self, post_service, storage, upload_request):
        with pytest.raises(UserNotFoundError):
            await post_service.upload_post("ghost", b"img", "image/png", "a.png", upload_request)
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_failed_insert_removes_stored_file(
        self, post_service, post_repo, storage, make_user, upload_request
    ):
        alice = make_user("alice")
        post_repo.fail_on_create = True

        with pytest.raises(RuntimeError):
            await post_service.upload_post(alice.id, b"img", "image/png", "a.png", upload_request)
        assert storage.objects == {}
        assert len(storage.deleted) == 1


class TestRetrieval:
    @pytest.mark.asyncio
    async def test_get_post(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        view = await post_service.get_post(post.id)
        assert view.id == post.id
        assert view.author.number_of_posts == 1

    @pytest.mark.asyncio
    async def test_get_missing_post(self, post_service):
        with pytest.raises(PostNotFoundError, match="Post not found"):
            await post_service.get_post("missing")

    @pytest.mark.asyncio
    async def test_list_posts_by_user(self, post_service, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        make_post(alice.id, "A1")
        make_post(bob.id, "B1")
        make_post(alice.id, "A2")

        titles = [v.title for v in await post_service.list_posts_by_user(alice.id)]
        assert titles == ["A1", "A2"]
        assert len(await post_service.list_posts()) == 3

    @pytest.mark.asyncio
    async def test_list_posts_by_unknown_user(self, post_service):
        with pytest.raises(UserNotFoundError):
            await post_service.list_posts_by_user("ghost")

    @pytest.mark.asyncio
    async def test_filter_attaches_authors(self, post_service, make_user, make_post):
        alice = make_user("alice")
        make_post(alice.id, "Trees", program="CS")
        make_post(alice.id, "Circuits", program="EE")

        views = await post_service.filter_posts(PostFilter(program="cs"))
        assert [v.title for v in views] == ["Trees"]
        assert views[0].author.user_id == alice.id


class TestUpdate:
    @pytest.mark.asyncio
    async def test_owner_updates_fields(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        view = await post_service.update_post(
            post.id, alice.id, UpdatePostRequest(title="New title", course="cs999")
        )
        assert view.title == "New title"
        assert view.category.course == "cs999"
        assert view.category.program == "CS"

    @pytest.mark.asyncio
    async def test_blank_strings_are_ignored_except_description(
        self, post_service, make_user, make_post
    ):
        alice = make_user("alice")
        post = make_post(alice.id)
        view = await post_service.update_post(
            post.id, alice.id, UpdatePostRequest(title="  ", description="")
        )
        assert view.title == post.title
        assert view.description == ""

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        with pytest.raises(NoUpdatesProvidedError):
            await post_service.update_post(post.id, alice.id, UpdatePostRequest(title=""))

    @pytest.mark.asyncio
    async def test_non_owner_is_denied(self, post_service, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)
        with pytest.raises(PostAccessDeniedError, match="not authorized to modify"):
            await post_service.update_post(post.id, bob.id, UpdatePostRequest(title="Mine"))


class TestDelete:
    @pytest.mark.asyncio
    async def test_owner_deletes_post_and_file(
        self, post_service, post_repo, storage, make_user, make_post
    ):
        alice = make_user("alice")
        post = make_post(alice.id)
        await post_service.delete_post(post.id, alice.id)

        assert post_repo.get_by_id(post.id) is None
        assert storage.deleted == [post.file_key]

    @pytest.mark.asyncio
    async def test_non_owner_is_denied(self, post_service, post_repo, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)
        with pytest.raises(PostAccessDeniedError, match="not allowed to delete"):
            await post_service.delete_post(post.id, bob.id)
        assert post_repo.get_by_id(post.id) is not None

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_row(
        self, post_service, post_repo, storage, make_user, make_post
    ):
        alice = make_user("alice")
        post = make_post(alice.id)
        storage.fail_on_delete = True

        with pytest.raises(StorageError):
            await post_service.delete_post(post.id, alice.id)
        assert post_repo.get_by_id(post.id) is not None


class TestInteractions:
    @pytest.mark.asyncio
    async def test_like_toggle_round_trip(self, post_service, post_repo, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)

        assert await post_service.toggle_like(post.id, bob.id) == 1
        assert post_repo.get_by_id(post.id).likes == [bob.id]
        assert await post_service.toggle_like(post.id, bob.id) == -1
        assert post_repo.get_by_id(post.id).likes == []

    @pytest.mark.asyncio
    async def test_like_lost_to_concurrent_like(
        self, post_service, post_repo, make_user, make_post, monkeypatch
    ):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)
        post_repo.add_like(post.id, bob.id)
        monkeypatch.setattr(post_repo, "has_like", lambda post_id, user_id: False)

        assert await post_service.toggle_like(post.id, bob.id) == 0
        assert post_repo.get_by_id(post.id).likes == [bob.id]

    @pytest.mark.asyncio
    async def test_unlike_lost_to_concurrent_unlike(
        self, post_service, post_repo, make_user, make_post, monkeypatch
    ):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)
        monkeypatch.setattr(post_repo, "has_like", lambda post_id, user_id: True)

        assert await post_service.toggle_like(post.id, bob.id) == 0
        assert post_repo.get_by_id(post.id).likes == []

    @pytest.mark.asyncio
    async def test_like_missing_post(self, post_service, make_user):
        bob = make_user("bob")
        with pytest.raises(PostNotFoundError):
            await post_service.toggle_like("missing", bob.id)

    @pytest.mark.asyncio
    async def test_save_toggle(self, post_service, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)

        state = await post_service.toggle_save(post.id, bob.id)
        assert state.saved is True
        assert state.saved_posts == [post.id]
        assert [v.id for v in await post_service.list_saved_posts(bob.id)] == [post.id]

        state = await post_service.toggle_save(post.id, bob.id)
        assert state.saved is False
        assert state.saved_posts == []
        assert await post_service.list_saved_posts(bob.id) == []

    @pytest.mark.asyncio
    async def test_report_blacklists_post(self, post_service, post_repo, user_repo, make_user, make_post):
        alice, bob = make_user("alice"), make_user("bob")
        post = make_post(alice.id)

        await post_service.report_post(post.id, bob.id)
        await post_service.report_post(post.id, bob.id)

        assert post_repo.get_by_id(post.id).is_blacklisted is True
        assert user_repo.get_by_id(bob.id).blacklisted_posts == [post.id]


class TestFiles:
    @pytest.mark.asyncio
    async def test_download(self, post_service, storage, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        storage.objects[post.file_key] = (b"%PDF", "application/pdf")

        download = await post_service.download_file(post.id)
        assert download.content == b"%PDF"
        assert download.content_type == "application/pdf"
        assert download.file_name == post.file_name

    @pytest.mark.asyncio
    async def test_download_defaults(self, post_service, storage, store, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        store.posts[post.id] = post.model_copy(
            update={"file_type": None, "file_name": None}
        )
        storage.objects[post.file_key] = (b"bytes", "")

        download = await post_service.download_file(post.id)
        assert download.content_type == "application/octet-stream"
        assert download.file_name == "file"

    @pytest.mark.asyncio
    async def test_download_without_file_key(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id, file_key="")
        with pytest.raises(PostFileNotFoundError):
            await post_service.download_file(post.id)

    @pytest.mark.asyncio
    async def test_preview_url_uses_configured_ttl(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        url = await post_service.get_preview_url(post.id)
        assert url.endswith(f"{post.file_key}?ttl=900")

    @pytest.mark.asyncio
    async def test_text_extraction(self, post_service, store, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        store.extracts[post.id] = "full text"

        extraction = await post_service.get_text_extraction(post.id)
        assert extraction.extracted_text == "full text"
        assert extraction.summary == "Summary not available"

        store.summaries[post.id] = "short"
        assert (await post_service.get_text_extraction(post.id)).summary == "short"

    @pytest.mark.asyncio
    async def test_text_extraction_missing(self, post_service, make_user, make_post):
        alice = make_user("alice")
        post = make_post(alice.id)
        with pytest.raises(TextExtractionNotFoundError):
            await post_service.get_text_extraction(post.id)
