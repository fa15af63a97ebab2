import os
import subprocess
import sys
from pathlib import Path


def test_repo_imports_without_editable_install():
    repo_root = Path(__file__).resolve().parents[2]
    env = os.environ.copy()
    env.pop("PYTHONPATH", None)
    env.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

    proc = subprocess.run(
        [sys.executable, "-c", "import swarmfield.headless; print(swarmfield.headless.__file__)"],
        cwd=repo_root,
        env=env,
        capture_output=True,
        text=True,
    )

    assert proc.returncode == 0, proc.stderr

    stdout = proc.stdout.strip().splitlines()
    stdout = stdout[-1] if stdout else ""
    assert stdout, "swarmfield.headless path not printed"

    output_path = Path(stdout).resolve()
    expected_path = (repo_root / "src" / "swarmfield" / "headless.py").resolve()
    assert output_path.samefile(expected_path)


def test_repo_exposes_server_and_world_without_editable_install():
    repo_root = Path(__file__).resolve().parents[2]
    env = os.environ.copy()
    env.pop("PYTHONPATH", None)
    env.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

    script = (
        "import swarmfield.app.server as server\n"
        "from swarmfield.sim.core.world import WorldState\n"
        "print(server.controller.world.state.value)\n"
        "print(server.__file__)\n"
    )
    proc = subprocess.run(
        [sys.executable, "-c", script],
        cwd=repo_root,
        env=env,
        capture_output=True,
        text=True,
    )

    assert proc.returncode == 0, proc.stderr

    lines = proc.stdout.strip().splitlines()
    assert lines[-2] == "Running"
    expected_path = (repo_root / "src" / "swarmfield" / "app" / "server.py").resolve()
    assert Path(lines[-1]).resolve().samefile(expected_path)
