import json
from unittest.mock import MagicMock

import pytest

from core.errors import ApiError
from core.models import BlogStatus, BlogSummary, DashboardStats, ListVariant, User
from vibewrite import VibeWriteApp


@pytest.fixture
def robot(tmp_path):
    """Builds a fresh Robot User in test mode."""
    return VibeWriteApp(test_mode=True, config_dir=tmp_path)


@pytest.fixture
def online(robot):
    """Robot signed in against a fake API."""
    robot.is_offline = False
    robot.api = MagicMock()
    robot.session.token = "t0k"
    robot.session.user = User(id="u1", username="robot", role="admin")
    return robot


def command(robot, text):
    buffer = MagicMock()
    buffer.text = text
    robot.handle_normal_input(buffer)
    return buffer


def test_robot_adds_word_to_dictionary(robot, tmp_path):
    """Scenario: User adds a custom word via :add command."""
    command(robot, ":add vibewrite")

    assert "vibewrite" in (tmp_path / "custom_dictionary.txt").read_text()
    assert "vibewrite" in robot.spell


def test_robot_recovery_system(robot, tmp_path):
    """Scenario: User writes content and the periodic tick caches it."""
    robot.title_field.text = "Robot's Secret Diary"
    robot.body_field.text = "I am a robot and I like Markdown."

    robot.auto_save_recovery()

    data = json.loads((tmp_path / ".vibewrite_draft.json").read_text())
    assert data["title"] == "Robot's Secret Diary"
    assert data["content"] == "I am a robot and I like Markdown."


def test_robot_recovery_loading(robot, tmp_path):
    """Scenario: Robot finds an existing draft cache and restores it."""
    (tmp_path / ".vibewrite_draft.json").write_text(json.dumps(
        {"title": "Recovered Title", "content": "Recovered Body", "tags": ["a"], "category": "Web"}))

    command(robot, ":restore")

    assert robot.title_field.text == "Recovered Title"
    assert robot.body_field.text == "Recovered Body"
    assert robot.tags_field.text == "a"
    assert robot.category_field.text == "Web"


def test_startup_mentions_cached_draft(tmp_path):
    (tmp_path / ".vibewrite_draft.json").write_text(json.dumps({"title": "x", "content": "y"}))

    robot = VibeWriteApp(test_mode=True, config_dir=tmp_path)

    assert ":restore" in robot.notifier.message


def test_offline_mode_prevents_save_but_keeps_copy(robot, tmp_path):
    robot.title_field.text = "Draft"

    assert robot.save_post() is False

    assert "Offline" in robot.notifier.message
    assert (tmp_path / ".vibewrite_draft.json").exists()


def test_save_requires_title(robot, tmp_path):
    robot.body_field.text = "words"

    robot.save_post()

    assert robot.notifier.message == "Please add a title before saving"
    assert not (tmp_path / ".vibewrite_draft.json").exists()


def test_save_draft_creates_then_updates(online):
    online.api.create_blog.return_value = {"success": True, "blog": {"_id": "b9"}}
    online.title_field.text = "Hello"
    online.body_field.text = "First words"

    assert online.save_post()

    payload = online.api.create_blog.call_args.args[0]
    assert payload["status"] == "draft"
    assert online.current_post_id == "b9"
    assert not online.is_dirty()
    assert online.notifier.message == "Draft saved successfully!"

    online.body_field.text = "First words, revised"
    online.save_post()
    online.api.update_blog.assert_called_once()
    assert online.api.update_blog.call_args.args[0] == "b9"


def test_publish_submits_for_review_and_clears(online, tmp_path):
    online.api.create_blog.return_value = {"success": True, "blog": {"_id": "b1"}}
    online.title_field.text = "Ship it"
    online.body_field.text = "Body text"
    online.tags_field.text = "News, news"
    command(online, ":cat ai & machine learning")

    assert online.publish_post()

    payload = online.api.create_blog.call_args.args[0]
    assert payload["status"] == "pending"
    assert payload["category"] == "AI & Machine Learning"
    assert payload["tags"] == ["news"]
    assert online.title_field.text == "" and online.body_field.text == ""
    assert not (tmp_path / ".vibewrite_draft.json").exists()
    assert online.notifier.message == "Blog submitted for review successfully!"


def test_publish_needs_category(online):
    online.title_field.text = "T"
    online.body_field.text = "B"

    assert online.publish_post() is False

    online.api.create_blog.assert_not_called()
    assert "category" in online.notifier.message


def test_failed_publish_keeps_editor(online):
    online.api.create_blog.side_effect = ApiError("Title already used", status=400)
    online.title_field.text = "Dup"
    online.body_field.text = "B"
    online.category_field.text = "web"

    assert online.publish_post() is False

    assert online.title_field.text == "Dup"
    assert "Title already used" in online.notifier.message


def test_format_and_tag_commands(robot):
    command(robot, ":fmt bold")
    command(robot, ":tag Python")
    command(robot, ":tag go")
    command(robot, ":untag python")

    assert robot.body_field.text == "**bold text**"
    assert robot.tags_field.text == "go"


def test_unknown_category_is_reported(robot):
    command(robot, ":cat poetry")
    assert "poetry" in robot.notifier.message
    assert robot.category_field.text == ""


def test_quit_with_unsaved_work_asks_first(robot):
    robot.body_field.text = "unsaved"

    command(robot, ":q")

    assert robot.is_warning_mode
    assert robot.pending_action == "quit"


def test_new_post_after_confirmation(robot):
    robot.title_field.text = "Old"
    robot.body_field.text = "unsaved"
    command(robot, ":new")

    answer = MagicMock()
    answer.text = "y"
    robot.handle_warning_input(answer)

    assert robot.title_field.text == "" and robot.body_field.text == ""
    assert not robot.is_warning_mode


def test_browse_search_and_sort(robot):
    api = MagicMock()
    api.get_blogs.return_value = {"blogs": [{"_id": "1", "title": "First Post", "likeCount": 3}], "total": 1, "pages": 1}
    robot.listing.api = api

    command(robot, ":browse")
    assert robot.show_browser
    assert "First Post" in robot.browser_field.text

    command(robot, ":search terminal editors")
    assert api.get_blogs.call_args.args[0]["search"] == "terminal editors"

    command(robot, ":sort popular")
    assert robot.listing.url_query == "search=terminal+editors&sort=popular"

    command(robot, ":sort sideways")
    assert "sideways" in robot.notifier.message
    assert robot.notifier.message.startswith("Unknown command")
    assert robot.listing.url_query == "search=terminal+editors&sort=popular"


def test_browse_error_shows_retry(robot):
    api = MagicMock()
    api.get_blogs.side_effect = ApiError("Request failed")
    robot.listing.api = api

    command(robot, ":browse")

    assert "F5" in robot.browser_field.text


def test_like_requires_login(robot):
    robot.listing.blogs = [BlogSummary(id="1", title="t")]

    command(robot, ":like 1")

    assert robot.notifier.message == "Please log in to like this post"


def test_bad_row_number(robot):
    command(robot, ":like 4")
    assert "4" in robot.notifier.message


def test_moderation_needs_admin(robot):
    command(robot, ":pending")
    assert robot.notifier.message == "Please log in first"
    assert robot.browser_variant == ListVariant.LIST


def test_admin_approves_from_pending_list(online):
    api = MagicMock()
    api.get_admin_dashboard.return_value = {"stats": {"blogs": {"pending": 1, "published": 2}}}
    api.get_pending_blogs.return_value = {"blogs": [{"_id": "p1", "title": "Waiting"}]}
    api.approve_blog.return_value = {"success": True}
    online.moderation.api = api

    command(online, ":pending")
    assert "Waiting" in online.browser_field.text

    command(online, ":approve 1")

    api.approve_blog.assert_called_once_with("p1")
    assert online.moderation.pending == []
    assert online.moderation.stats.published == 3


def test_approve_outside_pending_list_is_refused(online):
    api = MagicMock()
    online.moderation.api = api
    online.moderation.stats = DashboardStats(pending=3, published=5)
    online.listing.blogs = [BlogSummary(id="pub1", title="Live", status=BlogStatus.PUBLISHED)]
    online.browser_variant = ListVariant.LIST

    command(online, ":approve 1")
    command(online, ":reject 1 spam")

    api.approve_blog.assert_not_called()
    api.reject_blog.assert_not_called()
    assert (online.moderation.stats.pending, online.moderation.stats.published) == (3, 5)
    assert ":pending" in online.notifier.message


def test_delete_needs_typed_phrase(online):
    api = MagicMock()
    api.get_admin_blogs.return_value = {"blogs": [{"_id": "m1", "title": "Old"}]}
    online.moderation.api = api
    command(online, ":manage")

    command(online, ":delete 1")
    assert "DELETE" in online._warning_prompt()
    answer = MagicMock()
    answer.text = "y"
    online.handle_warning_input(answer)

    api.delete_admin_blog.assert_not_called()
    assert online.notifier.message == 'Please type "DELETE" to confirm'
    assert [b.id for b in online.moderation.managed] == ["m1"]


def test_admin_delete_asks_for_confirmation(online):
    api = MagicMock()
    api.get_admin_blogs.return_value = {"blogs": [{"_id": "m1", "title": "Old"}]}
    online.moderation.api = api
    command(online, ":manage")

    command(online, ":delete 1")
    assert online.is_warning_mode
    api.delete_admin_blog.assert_not_called()

    answer = MagicMock()
    answer.text = "DELETE"
    online.handle_warning_input(answer)

    api.delete_admin_blog.assert_called_once_with("m1")
    assert online.moderation.managed == []


@pytest.mark.parametrize("variant", list(ListVariant))
def test_every_list_variant_renders(robot, variant):
    row = BlogSummary(id="1", title="Row title", tags=("x",))
    robot.listing.blogs = [row]
    robot.trending.blogs = [row]
    robot.moderation.pending = [row]
    robot.moderation.managed = [row]
    robot.browser_variant = variant

    robot.render_browser()

    assert "Row title" in robot.browser_field.text


def test_status_bar_and_language(robot):
    robot.body_field.text = "one two three"

    text = "".join(part for _, part in robot.get_status_text())
    assert "Words: 3/500" in text
    assert "signed out" in text

    command(robot, ":spa")
    assert "MANUAL DE REFERENCIA" in robot.help_field.text
    assert "Palabras" in "".join(part for _, part in robot.get_status_text())


def test_live_preview_fragments(robot):
    robot.title_field.text = "Preview"
    robot.body_field.text = "**strong**"

    frags = robot.get_preview_fragments()

    assert any("md.bold" in style for style, _ in frags)
    assert robot.get_overlay_fragments() == frags


def test_typing_during_save_stays_unsaved(online):
    def slow_create(payload):
        online.body_field.text = "First words and more"
        return {"success": True, "blog": {"_id": "b2"}}
    online.api.create_blog.side_effect = slow_create
    online.title_field.text = "Hello"
    online.body_field.text = "First words"

    assert online.save_post()

    assert online.last_saved_content == "First words"
    assert online.is_dirty()


def test_register_command_creates_account(robot):
    robot.session.api = MagicMock()
    robot.session.api.register.return_value = {
        "token": "new-token", "user": {"_id": "u2", "username": "ada", "role": "user"}}

    command(robot, ":register ada ada@example.com Ada Lovelace secret1 secret1")

    sent = robot.session.api.register.call_args.args[0]
    assert sent == {"username": "ada", "email": "ada@example.com", "firstName": "Ada",
                    "lastName": "Lovelace", "password": "secret1"}
    assert robot.session.is_authenticated
    assert robot.notifier.message == "Registration successful!"


def test_register_command_checks_arguments(robot):
    robot.session.api = MagicMock()

    command(robot, ":register ada ada@example.com")
    assert robot.notifier.message.startswith("Usage: :register")

    command(robot, ":register ada ada@example.com Ada Lovelace secret1 secret2")
    assert robot.notifier.message == "Passwords do not match"
    robot.session.api.register.assert_not_called()
