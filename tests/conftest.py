import pytest

from autoupdater.core.gate import ConfirmationGate
from autoupdater.core.errors import ChecksumMismatchError, DownloadError, InstallError
from autoupdater.core.messages import Messages
from autoupdater.core.models import ModMetadata, UpdateCandidate, UpdateQueue
from autoupdater.core.orchestrator import UpdateOrchestrator
from autoupdater.core.session import UpdateSession

TEMP_PATH = "/tmp/autoupdater-test/mod-update.zip"

_STEP_ERRORS = {
    'download': DownloadError,
    'verify': ChecksumMismatchError,
    'install': InstallError,
}


class FakePrimitives:
    """Records every call together with the message shown at that moment."""

    def __init__(self, session: UpdateSession, fail: dict[str, str] | None = None,
                 progress: list[tuple[int, int, int]] | None = None):
        self.session = session
        self.fail = fail or {}
        self.progress = progress or []
        self.calls: list[tuple[str, str]] = []
        self.messages: list[str | None] = []
        self.deleted: list[str] = []

    def _step(self, step: str, name: str):
        self.calls.append((step, name))
        self.messages.append(self.session.current_message)
        if self.fail.get(name) == step:
            if step == 'verify':
                raise ChecksumMismatchError(name, "00" * 32, ("ff" * 32,))
            raise _STEP_ERRORS[step](f"{step} failed for {name}")

    def download(self, url, dest_path, on_progress):
        name = url.rsplit('/', 1)[-1]
        for sample in self.progress:
            on_progress(*sample)
        self._step('download', name)

    def verify_checksum(self, candidate, file_path):
        self._step('verify', candidate.name)

    def install(self, candidate, metadata, file_path):
        self._step('install', candidate.name)

    def try_delete(self, path):
        self.deleted.append(path)


class Recorder:
    def __init__(self):
        self.args: list[tuple] = []

    @property
    def calls(self) -> int:
        return len(self.args)

    def __call__(self, *args):
        self.args.append(args)


def make_queue(*names: str) -> UpdateQueue:
    return UpdateQueue(tuple(
        (UpdateCandidate(name=n, url=f"https://mods.example/{n}", checksums=("ab" * 32,)),
         ModMetadata(name=n, path=f"/mods/{n}.zip"))
        for n in names
    ))


@pytest.fixture
def session():
    return UpdateSession()


@pytest.fixture
def messages():
    return Messages()


@pytest.fixture
def restart():
    return Recorder()


@pytest.fixture
def sleep():
    return Recorder()


@pytest.fixture
def gate(session, messages, restart, sleep):
    return ConfirmationGate(session, messages.localize, restart,
                            restart_delay=0.5, sleep=sleep)


@pytest.fixture
def make_orchestrator(session, gate, messages):
    def factory(fail=None, progress=None, on_processed=None):
        primitives = FakePrimitives(session, fail=fail, progress=progress)
        orchestrator = UpdateOrchestrator(primitives, session, gate,
                                          messages.localize, TEMP_PATH, on_processed)
        return orchestrator, primitives
    return factory


@pytest.fixture
def queue_of():
    return make_queue


@pytest.fixture
def temp_path():
    return TEMP_PATH
