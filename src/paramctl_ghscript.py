#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_ghscript.py
----------------------------------------------------------------------
Script-component entry for "Parametric Controls" inside Grasshopper.

SETUP IN GRASSHOPPER (Rhino 8):

1. Double-click canvas -> type "Python" -> select "Python 3 Script".
2. Add one INPUT:  show  (Type Hint: bool), wire a Boolean Toggle to it.
3. Add one OUTPUT: out
4. Paste this into the component:

       import paramctl_ghscript
       out = paramctl_ghscript.run(show, ghenv)

5. Name your Number Sliders exactly like the tracked parameters in
   paramctl_config.DEFAULT_PARAMETERS (topCircleX, topCircleY, ...).

Toggle on -> the panel opens. Toggle off -> it closes. The session
lives in scriptcontext.sticky, so it survives the component's re-runs
and there is never more than one panel per Rhino session.
"""

from __future__ import annotations

import logging
from typing import Any, List, MutableMapping, Optional

from paramctl_config import PanelConfig
from paramctl_host import GrasshopperDocument, ScriptOutput, ScriptOutputHandler
from paramctl_session import PanelSession, WindowFactory

logger = logging.getLogger(__name__)

STICKY_KEY = "paramctl.component"

# Module loggers whose records go to the component's "out" parameter.
LOGGER_NAMES = (
    "paramctl_ghscript",
    "paramctl_gui",
    "paramctl_host",
    "paramctl_presets",
    "paramctl_session",
    "paramctl_sliders",
    "paramctl_sync",
)


class ComponentState:
    """What one script component keeps between solves."""

    def __init__(
        self,
        ghenv: Any,
        config: PanelConfig,
        window_factory: Optional[WindowFactory] = None,
    ) -> None:
        self.ghenv = ghenv
        self.output = ScriptOutput()
        self.session = PanelSession(config, self.current_document, window_factory)

    def current_document(self) -> GrasshopperDocument:
        return GrasshopperDocument(self.ghenv.Component.OnPingDocument())


def attach_output(output: ScriptOutput) -> ScriptOutputHandler:
    """Route INFO and above from the panel modules into `output`."""
    detach_output()
    handler = ScriptOutputHandler(output)
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        log.setLevel(logging.INFO)
        log.addHandler(handler)
    return handler


def detach_output() -> None:
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        for handler in list(log.handlers):
            if isinstance(handler, ScriptOutputHandler):
                log.removeHandler(handler)


def ensure_application() -> Any:
    """Rhino has no QApplication of its own; create one on first use."""
    from PyQt6 import QtWidgets

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


def _default_sticky() -> MutableMapping[str, Any]:
    import scriptcontext  # type: ignore

    return scriptcontext.sticky


def run(
    show: Optional[bool],
    ghenv: Any,
    sticky: Optional[MutableMapping[str, Any]] = None,
    config: Optional[PanelConfig] = None,
    window_factory: Optional[WindowFactory] = None,
) -> List[str]:
    """
    One solve of the script component. Returns the lines for "out".

    An unconnected `show` input arrives as None and counts as off.
    """
    if sticky is None:
        sticky = _default_sticky()

    state = sticky.get(STICKY_KEY)
    if state is None:
        state = ComponentState(ghenv, config or PanelConfig(), window_factory)
        sticky[STICKY_KEY] = state
        attach_output(state.output)
    state.ghenv = ghenv
    state.output.clear()

    if window_factory is None and show and not state.session.is_open():
        ensure_application()

    try:
        state.session.run_script(bool(show))
    except Exception as exc:
        logger.exception("Script exception: %s", exc)

    return state.output.lines()


__all__ = [
    "STICKY_KEY",
    "ComponentState",
    "attach_output",
    "detach_output",
    "ensure_application",
    "run",
]
