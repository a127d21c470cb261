from __future__ import annotations

from addon_manager.api.v1alpha1 import Phase


def from_install_outcome(err: BaseException | None) -> Phase:
    """Map an install outcome to the addon-visible phase.

    Every failure collapses to FAILED; the error itself carries the cause.
    """

    if err is None:
        return Phase.PENDING
    return Phase.FAILED
