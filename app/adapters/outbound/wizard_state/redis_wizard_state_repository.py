"""Redis adapter for wizard state."""

import json
from datetime import datetime, timezone
from typing import Optional

from redis import asyncio as aioredis

from app.application.ports.wizard_state_repository import WizardStateRepository
from app.domain.entities.wizard_state import WizardKind, WizardState
from app.domain.errors import TransportFailure
from app.infrastructure.logging.logger import logger


class RedisWizardStateRepository(WizardStateRepository):
    """Redis implementation of wizard state repository with TTL expiry."""

    KEY_PREFIX = "wizard:state:"

    def __init__(self, redis_url: str, ttl_seconds: int) -> None:
        """
        Initialize Redis wizard state repository.

        Args:
            redis_url: Redis connection URL
            ttl_seconds: Time-to-live in seconds, refreshed on every save
        """
        self._redis_url = redis_url
        self._ttl_seconds = ttl_seconds
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, wizard_id: str) -> str:
        return f"{self.KEY_PREFIX}{wizard_id}"

    def _serialize_state(self, state: WizardState) -> dict:
        """
        Serialize WizardState to dictionary.

        Args:
            state: Wizard state entity

        Returns:
            Dictionary representation of the state
        """
        return {
            "wizard_id": state.wizard_id,
            "kind": state.kind.value,
            "owner_id": state.owner_id,
            "step_index": state.step_index,
            "data": state.data,
            "errors": state.errors,
            "submit_error": state.submit_error,
            "lead_id": state.lead_id,
            "lead_preselected": state.lead_preselected,
            "created_at": state.created_at.isoformat() if state.created_at else None,
            "updated_at": state.updated_at.isoformat() if state.updated_at else None,
        }

    def _deserialize_state(self, data: dict) -> WizardState:
        """
        Deserialize dictionary to WizardState.

        Args:
            data: Dictionary representation of the state

        Returns:
            WizardState entity
        """
        created_at = None
        updated_at = None
        if data.get("created_at"):
            created_at = datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))
        if data.get("updated_at"):
            updated_at = datetime.fromisoformat(data["updated_at"].replace("Z", "+00:00"))

        return WizardState(
            wizard_id=data["wizard_id"],
            kind=WizardKind(data["kind"]),
            owner_id=data.get("owner_id"),
            step_index=data.get("step_index", 0),
            data=data.get("data") or {},
            errors=data.get("errors") or {},
            submit_error=data.get("submit_error"),
            lead_id=data.get("lead_id"),
            lead_preselected=data.get("lead_preselected", False),
            created_at=created_at or datetime.now(timezone.utc),
            updated_at=updated_at or datetime.now(timezone.utc),
        )

    async def get(self, wizard_id: str) -> Optional[WizardState]:
        """
        Get wizard state.

        A stored state that cannot be decoded is logged and treated as missing.

        Args:
            wizard_id: Wizard identifier

        Returns:
            Wizard state entity, or None if not found or unreadable

        Raises:
            TransportFailure: If Redis cannot be reached
        """
        try:
            client = await self._get_client()
            cached_data = await client.get(self._make_key(wizard_id))
        except Exception as e:
            logger.error(f"Error reading wizard state {wizard_id}: {str(e)}")
            raise TransportFailure("Could not load wizard progress") from e

        if cached_data is None:
            return None
        try:
            return self._deserialize_state(json.loads(cached_data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable wizard state {wizard_id}: {str(e)}")
            return None

    async def save(self, state: WizardState) -> None:
        """
        Store wizard state with TTL.

        Args:
            state: Wizard state entity to save

        Raises:
            TransportFailure: If Redis rejects the write
        """
        state.touch()
        try:
            client = await self._get_client()
            state_json = json.dumps(self._serialize_state(state), sort_keys=True)
            await client.setex(self._make_key(state.wizard_id), self._ttl_seconds, state_json)
        except Exception as e:
            logger.error(f"Error writing wizard state {state.wizard_id}: {str(e)}")
            raise TransportFailure("Could not save wizard progress") from e

    async def delete(self, wizard_id: str) -> None:
        """
        Delete wizard state.

        Args:
            wizard_id: Wizard identifier
        """
        try:
            client = await self._get_client()
            await client.delete(self._make_key(wizard_id))
        except Exception as e:
            # An undeleted wizard expires with its TTL
            logger.warning(f"Error deleting wizard state {wizard_id}: {str(e)}")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
