"""Unit tests for entity cache keys."""

import pytest

from tracker_gateway.cache.keys import EntityCacheKey, EntityType


class TestEntityCacheKey:
    """Tests for EntityCacheKey."""

    def test_create_key(self) -> None:
        key = EntityCacheKey.create_key(EntityType.ISSUE, "QUEUE-123")

        assert key == "issue:QUEUE-123"

    def test_distinct_types_never_collide(self) -> None:
        issue = EntityCacheKey.create_key(EntityType.ISSUE, "QUEUE-1")
        comment = EntityCacheKey.create_key(EntityType.COMMENT, "QUEUE-1")

        assert issue != comment

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            EntityCacheKey.create_key(EntityType.QUEUE, "")

    def test_parse_key(self) -> None:
        entity_type, entity_id = EntityCacheKey.parse_key("attachment:list:QUEUE-1")

        assert entity_type is EntityType.ATTACHMENT
        assert entity_id == "list:QUEUE-1"

    @pytest.mark.parametrize("key", ["issue", "issue:", "bogus:QUEUE-1"])
    def test_parse_malformed_key(self, key: str) -> None:
        with pytest.raises(ValueError):
            EntityCacheKey.parse_key(key)

    @pytest.mark.parametrize("entity_type", list(EntityType))
    def test_parse_inverts_create(self, entity_type: EntityType) -> None:
        key = EntityCacheKey.create_key(entity_type, "X-1")

        assert EntityCacheKey.parse_key(key) == (entity_type, "X-1")
