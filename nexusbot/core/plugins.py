"""
Discovery and loading of command and event modules

A plugin directory holds one Python module per command group or event.
Discovery yields a :class:`HandlerDescriptor` per module; every descriptor is
loaded on its own so one broken file never stops the rest from loading.

Command modules are discord.py extensions: they define module-level
``commands.Command`` objects and an ``async def setup(bot)`` entry point.

Event modules define ``event`` (the event name without the ``on_`` prefix)
and ``async def handle(bot, *args)``.
"""

import importlib
import importlib.util
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterator, List, Optional

from discord.ext import commands

from ..utils.errors import PluginLoadError
from ..utils.helpers import maybe_await


@dataclass(frozen=True)
class HandlerDescriptor:
    """A discovered plugin module"""

    name: str
    path: Path
    module_name: Optional[str] = None


class HandlerDiscovery:
    """Lazy, restartable view over the plugin modules of a directory

    Each iteration rescans the directory, so iterating twice picks up files
    added in between.
    """

    def __init__(self, directory, package: Optional[str] = None):
        self.directory = Path(directory)
        self.package = package

    def __iter__(self) -> Iterator[HandlerDescriptor]:
        if not self.directory.is_dir():
            return
        for path in sorted(self.directory.iterdir()):
            if path.suffix != ".py" or path.name.startswith("__"):
                continue
            module_name = f"{self.package}.{path.stem}" if self.package else None
            yield HandlerDescriptor(name=path.stem, path=path, module_name=module_name)

    def __repr__(self):
        return f"<HandlerDiscovery directory={str(self.directory)!r} package={self.package!r}>"


def discover_handlers(directory, package: Optional[str] = None) -> HandlerDiscovery:
    return HandlerDiscovery(directory, package)


@dataclass
class LoadReport:
    """Outcome of loading one plugin directory"""

    kind: str
    loaded: List[str] = field(default_factory=list)
    failed: Dict[str, BaseException] = field(default_factory=dict)


def import_descriptor(descriptor: HandlerDescriptor):
    """Import the module behind ``descriptor``

    Uses the dotted module name when there is one, otherwise imports straight
    from the file under a private name.
    """
    if descriptor.module_name:
        return importlib.import_module(descriptor.module_name)

    module_name = f"_nexusbot_plugin_{descriptor.path.parent.name}_{descriptor.name}"
    spec = importlib.util.spec_from_file_location(module_name, descriptor.path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {descriptor.path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def register_command_module(client, module) -> List[str]:
    """Register every module-level command of ``module`` on ``client``"""
    found = [obj for obj in vars(module).values() if isinstance(obj, commands.Command)]
    if not found:
        raise LookupError(f"{module.__name__} defines no commands")

    registered = []
    for command in found:
        client.add_command(command)
        registered.append(command.name)
    return registered


def bind_event_module(client, module) -> str:
    """Bind the ``handle`` coroutine of an event module to ``client``

    Returns the listener name (``on_<event>``) it was bound under.
    """
    event = getattr(module, "event", None)
    handle = getattr(module, "handle", None)
    if not event or handle is None:
        raise LookupError(f"{module.__name__} must define 'event' and 'handle'")

    async def listener(*args, **kwargs):
        return await handle(client, *args, **kwargs)

    listener.__name__ = f"on_{event}"
    listener.__qualname__ = f"{module.__name__}.handle"

    name = event if event.startswith("on_") else f"on_{event}"
    client.add_listener(listener, name)
    return name


async def load_each(
    descriptors,
    load: Callable[[HandlerDescriptor], Optional[Awaitable]],
    logger: logging.Logger,
    kind: str,
) -> LoadReport:
    """Run ``load`` for every descriptor, isolating failures per item"""
    report = LoadReport(kind=kind)

    for descriptor in descriptors:
        try:
            await maybe_await(load(descriptor))
        except Exception as e:
            error = PluginLoadError(descriptor, e)
            report.failed[descriptor.name] = error
            logger.warning(f"Failed to load {kind} '{descriptor.name}': {e}")
        else:
            report.loaded.append(descriptor.name)
            logger.debug(f"Loaded {kind}: {descriptor.name}")

    logger.info(f"{kind.capitalize()}s loaded: {len(report.loaded)}, failed: {len(report.failed)}")
    return report
