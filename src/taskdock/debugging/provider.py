"""Resolution of ``docker`` debug configurations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config import Config
from ..errors import ConfigurationError, UnrecognizedPlatformError
from ..helpers import default_helpers
from ..logging import get_logger
from ..platforms import Platform, classify
from ..tasks.store import WorkspaceTasks

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..cancellation import CancellationToken
    from ..helpers import TaskHelper
    from ..models import DebugConfiguration, TaskDefinition, WorkspaceFolder

logger = get_logger(__name__)


class DebugConfigurationProvider:
    """Dispatches a debug configuration to its platform helper."""

    def __init__(
        self,
        helpers: dict[Platform, TaskHelper] | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config()
        self.helpers = helpers if helpers is not None else default_helpers(self.config)

    def resolve_debug_configuration(
        self,
        folder: WorkspaceFolder | None,
        configuration: DebugConfiguration,
        token: CancellationToken | None = None,
        tasks: Sequence[TaskDefinition] | None = None,
    ) -> DebugConfiguration:
        """Return a launchable copy of ``configuration``.

        Raises:
            UnrecognizedPlatformError: If the platform can not be classified.
            ConfigurationError: If there is no workspace folder or a
                required option has no default.
        """
        platform = classify(configuration)
        helper = self.helpers.get(platform)
        if helper is None:
            raise UnrecognizedPlatformError(configuration.platform)
        if folder is None:
            raise ConfigurationError(
                f"Unable to determine the workspace folder for debug configuration "
                f"'{configuration.name}'."
            )

        if tasks is None:
            tasks = WorkspaceTasks(folder).load_tasks()

        logger.debug("Debug configuration '%s' targets %s", configuration.name, platform.value)
        return helper.resolve_debug_configuration(folder, configuration, tasks, token)
