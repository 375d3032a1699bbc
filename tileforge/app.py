"""Application - main loop orchestrator.

The Application class coordinates:
- Input handling (via InputHandler)
- Command execution against the file area, map editor or workspace
- Rendering (via Renderer)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional
import sys
import traceback

from .workspace import Workspace
from .renderer import Renderer, get_renderer
from .input_handler import InputHandler, get_input_handler
from .commands import CloseApp, Command, CommandQueue, FileAreaCommand, MapCommand
from .rl_compat import RL_VERSION, rl
from .config import TARGET_FPS, WINDOW_H, WINDOW_TITLE, WINDOW_W
from .logging import log, increment_frame


@dataclass
class Application:
    """
    Main application orchestrator.

    Usage:
        app = Application(Workspace.create("My Project"))
        app.initialize()
        app.run()
    """

    workspace: Workspace = field(default_factory=Workspace.create)
    renderer: Renderer = field(default_factory=get_renderer)
    input_handler: InputHandler = field(default_factory=get_input_handler)
    queue: CommandQueue = field(default_factory=CommandQueue)
    running: bool = False

    def initialize(self) -> bool:
        """Open the window. Returns True if initialization successful."""
        ws = self.workspace
        rl.SetConfigFlags(rl.FLAG_WINDOW_RESIZABLE)
        try:
            rl.InitWindow(ws.screen_w, ws.screen_h, WINDOW_TITLE)
        except TypeError:
            rl.InitWindow(ws.screen_w, ws.screen_h, WINDOW_TITLE.encode("utf-8"))
        rl.SetExitKey(0)  # Escape is handled by the input handler
        rl.SetTargetFPS(TARGET_FPS)
        log(f"[APP] Window {ws.screen_w}x{ws.screen_h} for {ws.project.name!r} ({RL_VERSION})")
        return bool(rl.IsWindowReady())

    def run(self) -> None:
        """Run the main loop until the window closes or CloseApp arrives."""
        self.running = True
        log("[APP] Starting main loop")

        try:
            while self.running:
                self._frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
            raise
        finally:
            self._cleanup()

    def _frame(self) -> None:
        if rl.WindowShouldClose():
            self.running = False
            return

        if rl.IsWindowResized():
            self.workspace.resize(rl.GetScreenWidth(), rl.GetScreenHeight())

        for cmd in self.input_handler.poll(self.workspace):
            self.execute_command(cmd)
            if not self.running:
                return

        self.renderer.draw_frame(self.workspace)
        increment_frame()

    def target_for(self, cmd: Command) -> Any:
        """Object a command runs against."""
        if isinstance(cmd, FileAreaCommand):
            return self.workspace.file_area
        if isinstance(cmd, MapCommand):
            return self.workspace.map_editor
        return self.workspace

    def execute_command(self, cmd: Command) -> bool:
        """Execute a single command."""
        if isinstance(cmd, CloseApp):
            cmd.execute(self.workspace)
            self.running = False
            return True

        result = self.queue.execute(cmd, self.target_for(cmd))
        if result and isinstance(cmd, MapCommand):
            self.workspace.touch_map()
        return result

    def _cleanup(self) -> None:
        log("[APP] Starting cleanup")
        menu = self.workspace.open_context_menu
        if menu is not None:
            menu.hide()
        try:
            self.renderer.unload()
            rl.CloseWindow()
        except Exception as e:
            log(f"[APP][ERR] Cleanup failed: {e!r}")
        log("[APP] Cleanup complete")


def create_app(project_name: str = "Untitled",
               workspace: Optional[Workspace] = None) -> Application:
    """Build an application around a new (or given) workspace."""
    ws = workspace or Workspace.create(project_name, screen_w=WINDOW_W, screen_h=WINDOW_H)
    return Application(workspace=ws)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    project_name = argv[0] if argv else "Untitled"
    app = create_app(project_name)
    if not app.initialize():
        log("[APP][ERR] Window failed to open")
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
