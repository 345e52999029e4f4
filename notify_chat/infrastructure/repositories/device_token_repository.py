"""Persistence helpers for registered device tokens."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from notify_chat.domain.entities import DEFAULT_DEVICE_TYPE, DeviceTarget, unique_targets
from notify_chat.infrastructure.models import DeviceTokenModel
from notify_chat.utils import utc_now_naive


class DeviceTokenRepository:
    """Provide lookup and registration of device tokens per user."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: str) -> Sequence[DeviceTarget]:
        return self.list_for_users([user_id]).get(user_id, ())

    def list_for_users(self, user_ids: Iterable[str]) -> dict[str, tuple[DeviceTarget, ...]]:
        """Return the device targets registered by each user, oldest first."""

        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        query = (
            self.session.query(DeviceTokenModel)
            .filter(DeviceTokenModel.user_id.in_(ids))
            .order_by(DeviceTokenModel.created_at.asc(), DeviceTokenModel.id.asc())
        )
        grouped: dict[str, list[DeviceTarget]] = defaultdict(list)
        for model in query.all():
            grouped[model.user_id].append(
                DeviceTarget(token=model.token, device_type=model.device_type)
            )
        return {user_id: unique_targets(targets) for user_id, targets in grouped.items()}

    def register(
        self, user_id: str, token: str, *, device_type: str = DEFAULT_DEVICE_TYPE
    ) -> DeviceTarget:
        """Insert ``token`` for ``user_id`` or refresh its device type when it exists."""

        model = (
            self.session.query(DeviceTokenModel)
            .filter(DeviceTokenModel.user_id == user_id, DeviceTokenModel.token == token)
            .one_or_none()
        )
        if model is None:
            model = DeviceTokenModel(user_id=user_id, token=token, device_type=device_type)
        else:
            model.device_type = device_type
            model.updated_at = utc_now_naive()
        self.session.add(model)
        self.session.commit()
        return DeviceTarget(token=model.token, device_type=model.device_type)

    def remove(self, token: str, *, user_id: str | None = None) -> int:
        """Delete ``token`` and return the number of removed rows."""

        query = self.session.query(DeviceTokenModel).filter(DeviceTokenModel.token == token)
        if user_id is not None:
            query = query.filter(DeviceTokenModel.user_id == user_id)
        removed = query.delete(synchronize_session=False)
        self.session.commit()
        return removed


__all__ = ["DeviceTokenRepository"]
