"""Unit tests for the blend collection and trance mode state."""

import asyncio

import pytest

from gallery.core.decorator import NotFound, ValidationFailed
from gallery.services.collection import CollectionService, TranceService, split_percentages
from gallery.utils.ai import ai_service


class TestSplitPercentages:
    """Tests for split_percentages."""

    def test_even_split_gives_remainder_to_first(self):
        assert split_percentages([1, 2, 3]) == {1: 34, 2: 33, 3: 33}

    def test_two_items(self):
        assert split_percentages([7, 8]) == {7: 50, 8: 50}

    def test_weights_are_normalised(self):
        assert split_percentages([1, 2], {1: 3, 2: 1}) == {1: 75, 2: 25}

    def test_zero_weights_fall_back_to_even(self):
        assert split_percentages([1, 2], {1: 0, 2: 0}) == {1: 50, 2: 50}

    def test_empty(self):
        assert split_percentages([]) == {}


class TestCollectionService:
    """Tests for CollectionService channelling."""

    def test_channel_adds_in_order(self, db, user, make_artwork):
        first, second = make_artwork(), make_artwork()
        service = CollectionService(db, user)

        service.channel(first.id)
        state = service.channel(second.id)

        assert [a.id for a in state["artworks"]] == [first.id, second.id]
        assert state["count"] == 2
        assert state["can_synthesize"] is True

    def test_duplicate_channel_is_noop(self, db, user, artwork):
        service = CollectionService(db, user)
        service.channel(artwork.id)

        state = service.channel(artwork.id)

        assert state["count"] == 1
        assert state["can_synthesize"] is False

    def test_collection_is_capped(self, db, user, make_artwork):
        service = CollectionService(db, user)
        for _ in range(5):
            service.channel(make_artwork().id)

        with pytest.raises(ValidationFailed, match="Collection is full"):
            service.channel(make_artwork().id)

    def test_unknown_artwork(self, db, user):
        with pytest.raises(NotFound):
            CollectionService(db, user).channel(404)

    def test_unchannel_and_clear(self, db, user, make_artwork):
        service = CollectionService(db, user)
        ids = [make_artwork().id for _ in range(3)]
        for artwork_id in ids:
            service.channel(artwork_id)

        state = service.unchannel(ids[1])
        assert [a.id for a in state["artworks"]] == [ids[0], ids[2]]

        assert service.clear()["count"] == 0

    def test_collections_are_per_user(self, db, make_user, artwork):
        owner = make_user(email="owner@example.com")
        other = make_user(email="other@example.com")
        CollectionService(db, owner).channel(artwork.id)

        assert CollectionService(db, other).get_state()["count"] == 0


class TestBlendPrompt:
    """Tests for prompt building and synthesis."""

    def test_prompt_lists_each_artwork_with_share(self, db, user, make_artwork):
        service = CollectionService(db, user)
        for title in ("Aurora", "Void", "Pulse"):
            service.channel(make_artwork(title, description=f"{title} light").id)

        prompt = service.build_blend_prompt("more violet", "quantum")

        assert '34% of "Aurora": Aurora light' in prompt
        assert '33% of "Void": Void light' in prompt
        assert '33% of "Pulse": Pulse light' in prompt
        assert "Additional vision: more violet" in prompt
        assert "Style: quantum" in prompt

    def test_requires_two_artworks(self, db, user, artwork):
        service = CollectionService(db, user)
        service.channel(artwork.id)

        with pytest.raises(ValidationFailed, match="At least 2"):
            service.build_blend_prompt(None, "cosmic")

    def test_synthesize_delegates_to_image_generation(
        self, db, user, make_artwork, monkeypatch
    ):
        captured = {}

        async def fake_generate_image(prompt):
            captured["prompt"] = prompt
            return {"image_url": "https://images.example/blend.png", "revised_prompt": None}

        monkeypatch.setattr(ai_service, "generate_image", fake_generate_image)
        service = CollectionService(db, user)
        service.channel(make_artwork().id)
        service.channel(make_artwork().id)

        result = asyncio.run(service.synthesize(None, "cosmic"))

        assert result["image_url"] == "https://images.example/blend.png"
        assert result["prompt"] == captured["prompt"]
        assert "A harmonious blend of cosmic energies" in captured["prompt"]


class TestTranceService:
    """Tests for TranceService."""

    def test_defaults(self, db, user):
        state = TranceService(db, user).get_state()

        assert state == {
            "trance_mode": False,
            "prompt_dismissed": False,
            "engagement_score": 0,
            "show_prompt": False,
        }

    def test_prompt_offered_after_threshold(self, db, user):
        service = TranceService(db, user)
        for _ in range(20):
            state = service.apply("engage")
        assert state["show_prompt"] is False

        state = service.apply("engage")

        assert state["engagement_score"] == 21
        assert state["show_prompt"] is True

    def test_prompt_suppressed(self, db, user):
        user.engagement_score = 50
        db.commit()
        service = TranceService(db, user)

        assert service.get_state(reduced_motion=True)["show_prompt"] is False
        assert service.apply("enable")["show_prompt"] is False
        service.apply("disable")
        assert service.apply("dismiss")["show_prompt"] is False

    def test_enable_disable(self, db, user):
        service = TranceService(db, user)

        assert service.apply("enable")["trance_mode"] is True
        assert service.apply("disable")["trance_mode"] is False

    def test_unknown_action(self, db, user):
        with pytest.raises(ValidationFailed):
            TranceService(db, user).apply("levitate")
