"""Cache key construction for tracker entities."""

from enum import Enum


KEY_SEPARATOR = ":"


class EntityType(str, Enum):
    """Tracker entity kinds that can be cached."""

    ISSUE = "issue"
    COMMENT = "comment"
    WORKLOG = "worklog"
    ATTACHMENT = "attachment"
    CHECKLIST = "checklist"
    QUEUE = "queue"
    PROJECT = "project"
    COMPONENT = "component"
    BOARD = "board"
    SPRINT = "sprint"
    FIELD = "field"
    USER = "user"


class EntityCacheKey:
    """Builds and parses ``<entity_type>:<entity_id>`` cache keys.

    Keeping key construction in one place lets mutations invalidate exactly
    the entries the matching reads created.
    """

    @staticmethod
    def create_key(entity_type: EntityType, entity_id: str) -> str:
        """Build a cache key.

        Args:
            entity_type: Kind of entity.
            entity_id: Entity identifier, e.g. ``QUEUE-123`` or ``list:QUEUE-1``.

        Returns:
            Cache key string.

        Raises:
            ValueError: If entity_id is empty.
        """
        if not entity_id:
            msg = "entity_id must not be empty"
            raise ValueError(msg)
        return f"{entity_type.value}{KEY_SEPARATOR}{entity_id}"

    @staticmethod
    def parse_key(key: str) -> tuple[EntityType, str]:
        """Split a cache key back into its entity type and id.

        Args:
            key: Key produced by ``create_key``.

        Returns:
            Tuple of entity type and entity id.

        Raises:
            ValueError: If the key is malformed or the type is unknown.
        """
        entity_type, sep, entity_id = key.partition(KEY_SEPARATOR)
        if not sep or not entity_id:
            msg = f"Malformed cache key: {key!r}"
            raise ValueError(msg)
        return EntityType(entity_type), entity_id
