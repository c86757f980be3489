"""Deletion of a whole building or floor."""

import hmac
import logging
from dataclasses import dataclass, field
from typing import Sequence

from site_inventory.exceptions import ConfigurationError, ConfirmationRejected
from site_inventory.hierarchy import flats_under
from site_inventory.models import FlatId, FlatRecord
from site_inventory.store.base import FlatStore

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Folder that was deleted and the flats removed with it."""

    target: list[str]
    flat_ids: list[FlatId] = field(default_factory=list)


def resolve_targets(
    flats: Sequence[FlatRecord], path: Sequence[str], folder_key: str
) -> list[FlatId]:
    """Ids of every flat inside ``folder_key`` opened from ``path``.

    ``path=[]`` targets a building and ``path=[block]`` a floor.
    """
    return [
        flat.flat_id
        for flat in flats_under(flats, [*path, folder_key])
        if flat.flat_id is not None
    ]


class CascadeDeleter:
    """Remove a folder and all flats beneath it in one bulk delete.

    Parameters
    ----------
    store : FlatStore
        Store receiving the bulk delete.
    confirmation_token : str | None
        Shared secret the caller must repeat; ``None`` disables folder
        deletion.
    """

    def __init__(self, store: FlatStore, confirmation_token: str | None) -> None:
        self.store = store
        self.confirmation_token = confirmation_token

    def delete_folder(
        self,
        flats: Sequence[FlatRecord],
        path: Sequence[str],
        folder_key: str,
        token: str | None,
    ) -> CascadeResult:
        """Delete a building or floor after checking the confirmation token.

        A folder with no flats under it is accepted without calling the
        store; the result then carries an empty ``flat_ids``.

        Raises
        ------
        ConfirmationRejected
            If the token does not match; nothing is resolved or deleted.
        ConfigurationError
            If no confirmation token is configured.
        """
        target = [*path, folder_key]
        context = {
            "project_id": next((flat.project_id for flat in flats), ""),
            "target": " > ".join(target),
        }
        self._confirm(token, context)

        flat_ids = resolve_targets(flats, path, folder_key)
        if flat_ids:
            self.store.delete_flats(flat_ids)
        logger.info(
            "Deleted %s with %d flats",
            context["target"],
            len(flat_ids),
            extra={**context, "flat_count": len(flat_ids)},
        )
        return CascadeResult(target=target, flat_ids=flat_ids)

    def _confirm(self, token: str | None, context: dict[str, str]) -> None:
        if not self.confirmation_token:
            raise ConfigurationError("Folder deletion is disabled: no delete token configured")
        if token is None or not hmac.compare_digest(
            token.encode("utf-8"), self.confirmation_token.encode("utf-8")
        ):
            logger.warning(
                "Rejected deletion of %s: incorrect password", context["target"], extra=context
            )
            raise ConfirmationRejected("Incorrect Password!")
