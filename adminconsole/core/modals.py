"""Transient dialogs handled as scoped acquire/show/hide resources."""
from __future__ import annotations
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class ModalKind(Enum):
    CREATE_FORM = "create-form"
    EDIT_FORM = "edit-form"
    RESET_PASSWORD_RESULT = "reset-password-result"
    CREATE_RESULT = "create-result"


class ModalHandle:
    """Handle to one dialog; closing hides it and releases its payload."""

    def __init__(self, coordinator: "ModalCoordinator", kind: ModalKind, payload: Any = None):
        self.coordinator = coordinator
        self.kind = kind
        self.payload = payload
        self.visible = False

    def show(self) -> "ModalHandle":
        self.visible = True
        return self

    def close(self) -> None:
        self.visible = False
        self.payload = None
        self.coordinator._release(self)

    @property
    def is_open(self) -> bool:
        return self.visible and self.coordinator.get(self.kind) is self

    def __enter__(self) -> "ModalHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ModalCoordinator:
    """Registry of the four console dialogs.

    Mutual exclusion between form dialogs is not enforced; callers avoid
    opening a second one. Closing never performs network activity.
    """

    def __init__(self):
        self._handles: dict[ModalKind, ModalHandle] = {}

    def open(self, kind: ModalKind, payload: Any = None) -> ModalHandle:
        """Acquire and show a dialog, replacing any handle of the same kind."""
        current = self._handles.get(kind)
        if current is not None:
            current.close()
        handle = ModalHandle(self, kind, payload).show()
        self._handles[kind] = handle
        logger.debug(f"Opened dialog {kind.value}")
        return handle

    @contextmanager
    def scoped(self, kind: ModalKind) -> Iterator[ModalHandle]:
        """Acquire a hidden dialog while its content loads.

        The handle is registered only once shown; if the block raises or
        exits without calling ``show()``, the payload is released.
        """
        handle = ModalHandle(self, kind)
        try:
            yield handle
        except BaseException:
            handle.close()
            raise
        if handle.visible:
            current = self._handles.get(kind)
            if current is not None and current is not handle:
                current.close()
            self._handles[kind] = handle
        else:
            handle.close()

    def get(self, kind: ModalKind) -> Optional[ModalHandle]:
        return self._handles.get(kind)

    def is_open(self, kind: ModalKind) -> bool:
        handle = self._handles.get(kind)
        return bool(handle and handle.visible)

    def close(self, kind: ModalKind) -> None:
        handle = self._handles.get(kind)
        if handle is not None:
            handle.close()

    def close_all(self) -> None:
        for handle in list(self._handles.values()):
            handle.close()

    def _release(self, handle: ModalHandle) -> None:
        if self._handles.get(handle.kind) is handle:
            del self._handles[handle.kind]
