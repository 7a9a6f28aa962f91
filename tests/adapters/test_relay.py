"""
Tests for the relay env file writer and the docker compose reloader.
"""

import asyncio
import os
import stat
from pathlib import Path

import pytest

from relaypanel.adapters.outbound.relay.config_writer import EnvFileRelayConfigWriter, render_secrets_env
from relaypanel.adapters.outbound.relay.docker_reloader import DockerComposeReloader
from relaypanel.domain.exceptions import SyncOperationException


def fake_binary(tmp_path: Path, body: str) -> str:
    script = tmp_path / "fake-docker"
    script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


def process_alive(pid: int) -> bool:
    try:
        with open(f"/proc/{pid}/stat", encoding="utf-8") as f:
            state = f.read().rsplit(")", 1)[1].split()[0]
    except FileNotFoundError:
        return False
    return state not in ("Z", "X")


class TestConfigWriter:

    def test_render(self):
        content = render_secrets_env(["a" * 32, "b" * 32])

        assert content == (
            "# Auto-generated by relay panel\n"
            "# DO NOT EDIT MANUALLY\n"
            f"SECRET={'a' * 32},{'b' * 32}\n"
        )

    async def test_write_creates_parent_directory(self, tmp_path):
        path = tmp_path / "proxy" / "mtproxy.env"
        writer = EnvFileRelayConfigWriter(str(path))

        await writer.write(["c" * 32])

        assert writer.path == str(path)
        assert path.read_text(encoding="utf-8").splitlines()[-1] == f"SECRET={'c' * 32}"


class TestDockerComposeReloader:
    """Command shape and process outcome handling."""

    def test_build_command(self):
        reloader = DockerComposeReloader("/opt/stack/docker-compose.yml", "panel", "mtproxy")

        assert reloader.build_command() == [
            "docker", "compose", "-p", "panel", "-f", "/opt/stack/docker-compose.yml",
            "up", "-d", "--force-recreate", "mtproxy",
        ]

    async def test_success_returns_stdout(self, tmp_path):
        binary = fake_binary(tmp_path, 'echo "recreated $@"')
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", stack_dir=str(tmp_path), docker_binary=binary)

        output = await reloader.reload()

        assert output == "recreated compose -p panel -f dc.yml up -d --force-recreate mtproxy"

    async def test_runs_in_stack_dir(self, tmp_path):
        binary = fake_binary(tmp_path, "pwd")
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", stack_dir=str(tmp_path), docker_binary=binary)

        assert os.path.realpath(await reloader.reload()) == os.path.realpath(str(tmp_path))

    async def test_non_zero_exit_uses_stderr(self, tmp_path):
        binary = fake_binary(tmp_path, "echo out; echo 'no such service' >&2; exit 3")
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", docker_binary=binary)

        with pytest.raises(SyncOperationException, match="no such service"):
            await reloader.reload()

    async def test_non_zero_exit_without_output(self, tmp_path):
        binary = fake_binary(tmp_path, "exit 4")
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", docker_binary=binary)

        with pytest.raises(SyncOperationException, match="code 4"):
            await reloader.reload()

    async def test_timeout_kills_process(self, tmp_path):
        binary = fake_binary(tmp_path, "exec sleep 5")
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", timeout=0.2, docker_binary=binary)

        with pytest.raises(SyncOperationException, match="timed out"):
            await reloader.reload()

    async def test_missing_binary(self, tmp_path):
        reloader = DockerComposeReloader(
            "dc.yml", "panel", "mtproxy", docker_binary=str(tmp_path / "does-not-exist")
        )

        with pytest.raises(SyncOperationException, match="Failed to start"):
            await reloader.reload()

    async def test_cancellation_kills_process(self, tmp_path):
        pid_file = tmp_path / "child.pid"
        binary = fake_binary(tmp_path, f'echo $$ > "{pid_file}"; exec sleep 30')
        reloader = DockerComposeReloader("dc.yml", "panel", "mtproxy", timeout=60, docker_binary=binary)

        task = asyncio.create_task(reloader.reload())
        for _ in range(100):
            if pid_file.exists() and pid_file.read_text().strip():
                break
            await asyncio.sleep(0.02)
        pid = int(pid_file.read_text().strip())
        assert process_alive(pid)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        for _ in range(100):
            if not process_alive(pid):
                break
            await asyncio.sleep(0.02)
        assert not process_alive(pid)
