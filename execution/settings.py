# PATH: execution/settings.py
"""
Execution settings with documented defaults.

Settings are merged shallowly: every option the caller supplies wins,
every option left out (or passed as None) falls back to the default.
Unknown keys in a mapping are kept in `extra` and passed through to the
step executors untouched.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from core.models import Route

UpdateCallback = Callable[[Route], None]
SwitchChainHook = Callable[[int], Awaitable[Optional[Any]]]


def _noop_update(route: Route) -> None:
    return None


async def _noop_switch_chain(required_chain_id: int) -> Optional[Any]:
    return None


@dataclass
class ExecutionSettings:
    """Options for one route execution."""
    # Called with the shared route after every step status change
    update_callback: Optional[UpdateCallback] = None
    # Called when a step needs the signer on another chain; returns the new signer
    switch_chain_hook: Optional[SwitchChainHook] = None
    infinite_approval: Optional[bool] = None
    # Executor-specific pass-through options
    extra: Dict[str, Any] = field(default_factory=dict)


DEFAULT_EXECUTION_SETTINGS = ExecutionSettings(
    update_callback=_noop_update,
    switch_chain_hook=_noop_switch_chain,
    infinite_approval=False,
)

SettingsInput = Union[ExecutionSettings, Mapping[str, Any], None]

_FIELD_NAMES = {f.name for f in fields(ExecutionSettings)}

# camelCase aliases accepted in mappings
_ALIASES = {
    "updateCallback": "update_callback",
    "switchChainHook": "switch_chain_hook",
    "infiniteApproval": "infinite_approval",
}


def _from_mapping(data: Mapping[str, Any]) -> ExecutionSettings:
    known: Dict[str, Any] = {}
    extra: Dict[str, Any] = dict(data.get("extra") or {})
    for key, value in data.items():
        if key == "extra":
            continue
        name = _ALIASES.get(key, key)
        if name in _FIELD_NAMES:
            known[name] = value
        else:
            extra[key] = value
    return ExecutionSettings(extra=extra, **known)


def merge_settings(
    settings: SettingsInput = None,
    defaults: ExecutionSettings = DEFAULT_EXECUTION_SETTINGS,
) -> ExecutionSettings:
    """
    Merge caller settings over defaults.

    Args:
        settings: ExecutionSettings, a plain mapping, or None
        defaults: Base settings (DEFAULT_EXECUTION_SETTINGS unless overridden)

    Returns:
        A new ExecutionSettings with every option populated
    """
    if settings is None:
        return replace(defaults, extra=dict(defaults.extra))

    if isinstance(settings, Mapping):
        settings = _from_mapping(settings)

    return ExecutionSettings(
        update_callback=(
            settings.update_callback
            if settings.update_callback is not None
            else defaults.update_callback
        ),
        switch_chain_hook=(
            settings.switch_chain_hook
            if settings.switch_chain_hook is not None
            else defaults.switch_chain_hook
        ),
        infinite_approval=(
            settings.infinite_approval
            if settings.infinite_approval is not None
            else defaults.infinite_approval
        ),
        extra={**defaults.extra, **settings.extra},
    )
