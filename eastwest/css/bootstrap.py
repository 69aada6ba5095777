"""
Deferred stylesheet bootstrap
=============================

Pages ship with the critical CSS inlined in ``<head>``.  The full
stylesheet is fetched later, when the first of three signals fires:

* the browser reports idle time (``requestIdleCallback`` with a short
  timeout, or a 50 ms timer where idle callbacks are missing),
* the visitor interacts with the page (pointer, touch, key, scroll, wheel),
* a 1 second fallback timer.

Whichever fires first performs the load; the others are cancelled and a
``loaded`` flag guards against any late arrival.  The stylesheet is
attached with ``media="print"`` so it does not block rendering, then
switched to ``media="all"`` when the browser reports it loaded, or after
an activation timeout if that report never comes.

:class:`StylesheetBootstrap` is the protocol driven against a
:class:`PageHost`; :func:`render_bootstrap_script` renders the browser
script that runs the same protocol with the same constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from ..templating import render_template
from .bundle import CriticalCSSBundle, load_bundle

Callback = Callable[[], None]


@dataclass(frozen=True)
class BootstrapConfig:
    deferred_href: str = "/css/deferred-styles.css"
    idle_timeout_ms: int = 100
    idle_fallback_ms: int = 50
    fallback_timeout_ms: int = 1000
    activation_timeout_ms: int = 3000
    interaction_events: tuple[str, ...] = (
        "mousedown",
        "touchstart",
        "keydown",
        "scroll",
        "wheel",
    )
    critical_images: tuple[str, ...] = ("/images/banner.webp",)
    prefetch_images: tuple[str, ...] = (
        "/images/parallax-image.webp",
        "/images/guru2023.webp",
        "/images/guru2024.webp",
    )
    prefetch_idle_timeout_ms: int = 2000
    prefetch_fallback_ms: int = 1000


DEFAULT_BOOTSTRAP_CONFIG = BootstrapConfig()


class BootstrapState(str, Enum):
    INLINE_ONLY = "inline_only"
    LOADING = "loading"
    FULL_CSS_ACTIVE = "full_css_active"


@dataclass
class StylesheetLink:
    href: str
    media: str = "print"
    on_load: Callback | None = None


@dataclass(frozen=True)
class ResourceHint:
    rel: str
    href: str
    as_: str = "image"
    fetch_priority: str | None = None


class PageHost(Protocol):
    """The slice of the browser environment the bootstrap talks to."""

    def set_timeout(self, callback: Callback, delay_ms: int) -> int: ...

    def clear_timeout(self, handle: int) -> None: ...

    def request_idle_callback(self, callback: Callback, timeout_ms: int) -> int | None:
        """Schedule *callback* for idle time; ``None`` when unsupported."""
        ...

    def cancel_idle_callback(self, handle: int) -> None: ...

    def add_event_listener(self, event: str, handler: Callback) -> None: ...

    def remove_event_listener(self, event: str, handler: Callback) -> None: ...

    def append_stylesheet(self, link: StylesheetLink) -> None: ...

    def append_style(self, css: str) -> None: ...

    def append_resource_hint(self, hint: ResourceHint) -> None: ...


def critical_image_hints(
    config: BootstrapConfig = DEFAULT_BOOTSTRAP_CONFIG,
) -> list[ResourceHint]:
    """High-priority preloads rendered straight into ``<head>``."""
    return [
        ResourceHint(rel="preload", href=src, fetch_priority="high")
        for src in config.critical_images
    ]


class StylesheetBootstrap:
    def __init__(
        self,
        host: PageHost,
        config: BootstrapConfig = DEFAULT_BOOTSTRAP_CONFIG,
        bundle: CriticalCSSBundle | None = None,
    ) -> None:
        self.host = host
        self.config = config
        self.bundle = bundle or load_bundle()
        self.state = BootstrapState.INLINE_ONLY
        self.trigger_source: str | None = None
        self.load_count = 0
        self.activation_count = 0
        self.link: StylesheetLink | None = None

        self._loaded = False
        self._started = False
        self._timers: set[int] = set()
        self._idle_handles: set[int] = set()
        self._trigger_cancellers: list[Callback] = []
        self._activation_timer = -1
        self._listening = False

    # -- scheduling ---------------------------------------------------------

    def _set_timeout(self, callback: Callback, delay_ms: int) -> int:
        holder: dict[str, int] = {}

        def run() -> None:
            self._timers.discard(holder["handle"])
            callback()

        holder["handle"] = self.host.set_timeout(run, delay_ms)
        self._timers.add(holder["handle"])
        return holder["handle"]

    def _clear_timeout(self, handle: int) -> None:
        if handle in self._timers:
            self._timers.discard(handle)
            self.host.clear_timeout(handle)

    def _cancel_idle(self, handle: int) -> None:
        if handle in self._idle_handles:
            self._idle_handles.discard(handle)
            self.host.cancel_idle_callback(handle)

    def _on_idle(self, callback: Callback, timeout_ms: int, fallback_ms: int) -> Callback:
        """Schedule *callback* for idle time and return its canceller."""
        holder: dict[str, int] = {}

        def run() -> None:
            self._idle_handles.discard(holder.get("handle", -1))
            callback()

        handle = self.host.request_idle_callback(run, timeout_ms)
        if handle is None:
            timer = self._set_timeout(callback, fallback_ms)
            return lambda: self._clear_timeout(timer)

        holder["handle"] = handle
        self._idle_handles.add(handle)
        return lambda: self._cancel_idle(handle)

    def start(self) -> None:
        if self._started:
            return
        self._started = True

        cancel_idle = self._on_idle(
            lambda: self._fire("idle"),
            self.config.idle_timeout_ms,
            self.config.idle_fallback_ms,
        )
        for event in self.config.interaction_events:
            self.host.add_event_listener(event, self._on_interaction)
        self._listening = True
        fallback = self._set_timeout(
            lambda: self._fire("timeout"), self.config.fallback_timeout_ms
        )
        self._trigger_cancellers = [cancel_idle, lambda: self._clear_timeout(fallback)]

        self._on_idle(
            self._prefetch_images,
            self.config.prefetch_idle_timeout_ms,
            self.config.prefetch_fallback_ms,
        )

    def _remove_listeners(self) -> None:
        if not self._listening:
            return
        for event in self.config.interaction_events:
            self.host.remove_event_listener(event, self._on_interaction)
        self._listening = False

    def teardown(self) -> None:
        """Clear every pending timer, idle callback and listener."""
        for handle in list(self._timers):
            self.host.clear_timeout(handle)
        self._timers.clear()
        for handle in list(self._idle_handles):
            self.host.cancel_idle_callback(handle)
        self._idle_handles.clear()
        self._remove_listeners()

    # -- load / activate ----------------------------------------------------

    def _on_interaction(self) -> None:
        self._fire("interaction")

    def _fire(self, source: str) -> None:
        if self._loaded:
            return
        self._loaded = True
        self.trigger_source = source
        for cancel in self._trigger_cancellers:
            cancel()
        self._remove_listeners()
        self._load()

    def _load(self) -> None:
        self.load_count += 1
        self.state = BootstrapState.LOADING
        self.link = StylesheetLink(href=self.config.deferred_href, on_load=self._activate)
        self.host.append_stylesheet(self.link)
        self._activation_timer = self._set_timeout(
            self._activate, self.config.activation_timeout_ms
        )
        self.host.append_style(self.bundle.deferred)

    def _activate(self) -> None:
        if self.link is None or self.link.media != "print":
            return
        self._clear_timeout(self._activation_timer)
        self.link.media = "all"
        self.state = BootstrapState.FULL_CSS_ACTIVE
        self.activation_count += 1

    def _prefetch_images(self) -> None:
        for src in self.config.prefetch_images:
            self.host.append_resource_hint(ResourceHint(rel="prefetch", href=src))


def render_bootstrap_script(
    config: BootstrapConfig = DEFAULT_BOOTSTRAP_CONFIG,
    bundle: CriticalCSSBundle | None = None,
) -> str:
    """Browser-side implementation of :class:`StylesheetBootstrap`."""
    bundle = bundle or load_bundle()
    return render_template("bootstrap.js", config=config, deferred_css=bundle.deferred)
