#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paramctl_session.py
----------------------------------------------------------------------
PanelSession: owns the (at most one) open panel window.

A script component re-runs on every solve. It calls
session.run_script(show) each time with its boolean input:

    show and no panel     -> open one
    show and panel open   -> nothing
    not show and open     -> close it
    not show and closed   -> nothing

The window reports a user-initiated close through on_window_closed(),
so toggling the input off and on again always gives a fresh panel.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from paramctl_config import PanelConfig

logger = logging.getLogger(__name__)


WindowFactory = Callable[[PanelConfig, Any, Callable[[Any], None]], Any]


class PanelSession:
    """
    Parameters
    ----------
    config :
        Tracked parameters and panel settings.
    document_provider :
        Zero-argument callable returning the host document at open time.
    window_factory :
        Builds a window from (config, document, on_closed). The window
        must offer show() and close(). Defaults to paramctl_gui.ParamWindow.
    """

    def __init__(
        self,
        config: PanelConfig,
        document_provider: Callable[[], Any],
        window_factory: Optional[WindowFactory] = None,
    ) -> None:
        self.config = config
        self._document_provider = document_provider
        self._window_factory = window_factory
        self._window: Optional[Any] = None

    @property
    def window(self) -> Optional[Any]:
        return self._window

    def is_open(self) -> bool:
        return self._window is not None

    def open(self) -> Any:
        if self._window is not None:
            logger.debug("Panel already open; ignoring open request")
            return self._window

        factory = self._window_factory
        if factory is None:
            from paramctl_gui import ParamWindow

            factory = ParamWindow

        document = self._document_provider()
        window = factory(self.config, document, self.on_window_closed)
        self._window = window
        window.show()
        logger.info("Panel opened")
        return window

    def close(self) -> None:
        window = self._window
        if window is None:
            return
        # Clear first so the window's close callback is a no-op.
        self._window = None
        window.close()
        logger.info("Panel closed")

    def on_window_closed(self, window: Any) -> None:
        if window is self._window:
            self._window = None
            logger.info("Panel closed by user")

    def run_script(self, show: bool) -> None:
        if show:
            if not self.is_open():
                self.open()
        elif self.is_open():
            self.close()


__all__ = ["PanelSession"]
