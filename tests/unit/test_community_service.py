"""Unit tests for reactions, comment likes and comment moderation."""

import pytest

from gallery.core.decorator import ModerationRejected, NotFound, ValidationFailed
from gallery.models.reaction import REACTION_TYPES, Reaction
from gallery.services.community import (
    CommunityService,
    contains_banned_word,
    validate_comment_content,
)


class TestToggleReaction:
    """Tests for CommunityService.toggle_reaction."""

    def test_first_cosmic_reaction_is_selected(self, db, user, artwork):
        result = CommunityService(db).toggle_reaction(user.id, artwork.id, "cosmic")

        assert result == {"type": "cosmic", "count": 1, "is_selected": True}

    def test_second_toggle_removes_reaction(self, db, user, artwork):
        service = CommunityService(db)
        service.toggle_reaction(user.id, artwork.id, "cosmic")

        result = service.toggle_reaction(user.id, artwork.id, "cosmic")

        assert result == {"type": "cosmic", "count": 0, "is_selected": False}
        assert db.query(Reaction).count() == 0

    def test_toggle_twice_restores_other_users_count(self, db, make_user, artwork):
        first = make_user(email="first@example.com")
        second = make_user(email="second@example.com")
        service = CommunityService(db)
        service.toggle_reaction(first.id, artwork.id, "love")

        service.toggle_reaction(second.id, artwork.id, "love")
        result = service.toggle_reaction(second.id, artwork.id, "love")

        assert result["count"] == 1
        assert result["is_selected"] is False

    def test_types_are_independent(self, db, user, artwork):
        service = CommunityService(db)
        service.toggle_reaction(user.id, artwork.id, "love")

        result = service.toggle_reaction(user.id, artwork.id, "mystical")

        assert result["count"] == 1
        assert db.query(Reaction).filter(Reaction.user_id == user.id).count() == 2

    @pytest.mark.parametrize("reaction_type", ["like", "", None, "COSMIC"])
    def test_invalid_type_rejected(self, db, user, artwork, reaction_type):
        with pytest.raises(ValidationFailed) as exc_info:
            CommunityService(db).toggle_reaction(user.id, artwork.id, reaction_type)

        assert exc_info.value.message == "Invalid reaction type"
        assert exc_info.value.status_code == 400

    def test_unknown_artwork(self, db, user):
        with pytest.raises(NotFound):
            CommunityService(db).toggle_reaction(user.id, 9999, "cosmic")


class TestToggleCommentLike:
    """Tests for CommunityService.toggle_comment_like."""

    def test_like_then_unlike(self, db, user, artwork):
        service = CommunityService(db)
        comment = service.create_comment(user, artwork.id, "Beautiful colours")

        liked = service.toggle_comment_like(user.id, comment["id"])
        unliked = service.toggle_comment_like(user.id, comment["id"])

        assert liked == {"likes": 1, "is_liked": True}
        assert unliked == {"likes": 0, "is_liked": False}

    def test_unknown_comment(self, db, user):
        with pytest.raises(NotFound):
            CommunityService(db).toggle_comment_like(user.id, 4242)


class TestCommentValidation:
    """Tests for comment trimming, length and banned words."""

    def test_content_is_trimmed(self):
        assert validate_comment_content("   radiant   ") == "radiant"

    @pytest.mark.parametrize("content", ["", "    ", "\n\t", "x" * 501])
    def test_length_outside_bounds_rejected(self, content):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_comment_content(content)

        assert exc_info.value.message == "Comment must be between 1 and 500 characters"

    def test_exactly_max_length_accepted(self):
        assert len(validate_comment_content("y" * 500)) == 500

    def test_padding_does_not_count_toward_length(self):
        assert validate_comment_content("  " + "z" * 500 + "  ") == "z" * 500

    def test_missing_content(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_comment_content(None)

        assert exc_info.value.message == "Comment content is required"

    @pytest.mark.parametrize(
        "content", ["This is SPAM", "what a scam!", "looks fake", "unfakeable"]
    )
    def test_banned_substrings_rejected(self, content):
        with pytest.raises(ModerationRejected) as exc_info:
            validate_comment_content(content)

        assert exc_info.value.error_type == "moderation_error"
        assert exc_info.value.status_code == 400

    def test_contains_banned_word_is_case_insensitive(self):
        assert contains_banned_word("ScAm alert", ["scam"])
        assert not contains_banned_word("stellar", ["scam"])


class TestCreateComment:
    """Tests for CommunityService.create_comment."""

    def test_returns_created_comment(self, db, user, artwork):
        comment = CommunityService(db).create_comment(user, artwork.id, "  Stunning  ")

        assert comment["content"] == "Stunning"
        assert comment["user"] == {"name": user.name, "email": user.email}
        assert comment["likes"] == 0
        assert comment["is_liked"] is False
        assert comment["created_at"] is not None

    def test_unknown_artwork(self, db, user):
        with pytest.raises(NotFound):
            CommunityService(db).create_comment(user, 31337, "Hello")


class TestGetCommunity:
    """Tests for the community aggregation."""

    def test_empty_artwork_lists_all_five_types(self, db, artwork):
        result = CommunityService(db).get_community(artwork.id)

        assert [r["type"] for r in result["reactions"]] == list(REACTION_TYPES)
        assert all(r["count"] == 0 for r in result["reactions"])
        assert result["comments"] == []
        assert result["stats"] == {"total_comments": 0, "total_reactions": 0}

    def test_counts_and_viewer_flags(self, db, make_user, artwork):
        viewer = make_user(email="viewer@example.com")
        other = make_user(email="other@example.com")
        service = CommunityService(db)
        service.toggle_reaction(viewer.id, artwork.id, "cosmic")
        service.toggle_reaction(other.id, artwork.id, "cosmic")
        service.toggle_reaction(other.id, artwork.id, "love")
        older = service.create_comment(other, artwork.id, "first")
        newer = service.create_comment(other, artwork.id, "second")
        service.toggle_comment_like(viewer.id, older["id"])

        result = service.get_community(artwork.id, viewer_id=viewer.id)

        by_type = {r["type"]: r for r in result["reactions"]}
        assert by_type["cosmic"]["count"] == 2
        assert by_type["cosmic"]["is_selected"] is True
        assert by_type["love"]["is_selected"] is False
        assert [c["id"] for c in result["comments"]] == [newer["id"], older["id"]]
        assert result["comments"][1]["likes"] == 1
        assert result["comments"][1]["is_liked"] is True
        assert result["stats"] == {"total_comments": 2, "total_reactions": 3}

    def test_anonymous_viewer_has_no_selection(self, db, user, artwork):
        service = CommunityService(db)
        service.toggle_reaction(user.id, artwork.id, "transcendent")

        result = service.get_community(artwork.id)

        assert not any(r["is_selected"] for r in result["reactions"])

    def test_unknown_artwork(self, db):
        with pytest.raises(NotFound):
            CommunityService(db).get_community(777)
