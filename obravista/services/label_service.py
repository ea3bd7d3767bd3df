"""Label (etiqueta) catalog."""

from __future__ import annotations

from sqlalchemy import func, select

from obravista.core.exceptions import ValidationError
from obravista.models import Label
from obravista.schemas.tasks import LabelCreateRequest
from obravista.services.base_service import BaseService


class LabelService(BaseService):
    def list_labels(self) -> list[Label]:
        return list(self.db.scalars(select(Label).order_by(Label.name)))

    def create_label(self, payload: LabelCreateRequest) -> Label:
        name = payload.name.strip()
        self._assert_unique(name)
        label = Label(name=name, color=payload.color.upper())
        self.db.add(label)
        self.commit()
        self.db.refresh(label)
        return label

    def update_label(self, label_id: int, payload: LabelCreateRequest) -> Label:
        label = self._require(Label, label_id, "Label")
        name = payload.name.strip()
        self._assert_unique(name, exclude_id=label.id)
        label.name = name
        label.color = payload.color.upper()
        self.commit()
        self.db.refresh(label)
        return label

    def delete_label(self, label_id: int) -> None:
        """Delete a catalog label; its links to tasks go with it."""
        self.db.delete(self._require(Label, label_id, "Label"))
        self.commit()

    def _assert_unique(self, name: str, exclude_id: int | None = None) -> None:
        query = select(Label.id).where(func.lower(Label.name) == name.lower())
        if exclude_id is not None:
            query = query.where(Label.id != exclude_id)
        if self.db.scalar(query) is not None:
            raise ValidationError(f"A label named {name!r} already exists.")
