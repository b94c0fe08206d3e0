"""Permission state resolution for the shared media catalog.

The state is an immutable `PermissionState` produced by a single query and
passed explicitly to whoever needs it; grant results produce a new value
instead of mutating flags in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future

from loguru import logger

from core.models import PermissionState
from core.services.interfaces import IPermissionProvider, Permission


def query_permission_state(
    provider: IPermissionProvider, scoped_storage: bool = False
) -> PermissionState:
    """Read both capabilities from `provider`.

    With scoped storage the app may always write media it creates itself, so
    write counts as granted regardless of the provider's answer.
    """
    has_read = bool(provider.check(Permission.READ_EXTERNAL_STORAGE))
    has_write = bool(provider.check(Permission.WRITE_EXTERNAL_STORAGE))
    return PermissionState(read_granted=has_read, write_granted=has_write or scoped_storage)


def permissions_to_request(state: PermissionState) -> list[Permission]:
    """Return the permissions to ask for, read and write together when write is missing."""
    if state.write_granted:
        return []
    return [Permission.READ_EXTERNAL_STORAGE, Permission.WRITE_EXTERNAL_STORAGE]


def merge_grant_result(
    state: PermissionState, results: Mapping[Permission, bool]
) -> PermissionState:
    """Apply a grant result; permissions absent from `results` keep their value."""
    read = results.get(Permission.READ_EXTERNAL_STORAGE)
    write = results.get(Permission.WRITE_EXTERNAL_STORAGE)
    return PermissionState(
        read_granted=state.read_granted if read is None else bool(read),
        write_granted=state.write_granted if write is None else bool(write),
    )


def resolve_permissions(
    provider: IPermissionProvider,
    scoped_storage: bool = False,
    initial: PermissionState | None = None,
) -> Future[PermissionState]:
    """Request what is missing and resolve with the final state.

    `initial` is the result of an earlier `query_permission_state`; the
    provider is queried when it is omitted. The returned future is already
    done when nothing needs requesting.
    """
    state = initial if initial is not None else query_permission_state(provider, scoped_storage)
    result: Future[PermissionState] = Future()
    missing = permissions_to_request(state)
    if not missing:
        result.set_result(state)
        return result

    logger.info("Requesting permissions: {}", ", ".join(p.value for p in missing))
    request = provider.request(missing)

    def _on_done(fut: Future[dict[Permission, bool]]) -> None:
        try:
            granted = fut.result()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Permission request failed: {}", ex)
            result.set_result(state)
            return
        merged = merge_grant_result(state, granted)
        logger.info(
            "Permission result: read={} write={}", merged.read_granted, merged.write_granted
        )
        result.set_result(merged)

    request.add_done_callback(_on_done)
    return result
