"""Renderer registry for pipeline artifacts."""

from typing import Any, Callable, Dict, Iterable, List

from ..pipeline.project_config import ProjectConfig
from ..pipeline.stages import Stage

# (ProjectConfig, stages) -> rendered artifact (text or mapping)
Renderer = Callable[[ProjectConfig, Iterable[Stage]], Any]


class RendererRegistry:
    """Registry mapping artifact names to renderers."""

    def __init__(self):
        self._renderers: Dict[str, Renderer] = {}

    def register(self, name: str, renderer: Renderer):
        """Register a renderer for an artifact name, replacing any existing one."""
        self._renderers[name] = renderer

    def get_renderer(self, name: str) -> Renderer:
        """Get renderer for artifact name."""
        if name not in self._renderers:
            raise ValueError(
                f"No renderer registered for artifact: {name}. "
                f"Available: {', '.join(self.names())}"
            )
        return self._renderers[name]

    def names(self) -> List[str]:
        return list(self._renderers)

    def render(self, name: str, config: ProjectConfig, stages: Iterable[Stage]) -> Any:
        """Render one artifact."""
        renderer = self.get_renderer(name)
        return renderer(config, stages)


# Global registry instance
registry = RendererRegistry()
