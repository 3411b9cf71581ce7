import copy
import json
import logging
import tempfile
from pathlib import Path

from utils.errors import CorruptStoreError, WriteError
from utils.system_settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

DB_DIR = Path("public")
DB_PATH = DB_DIR / "database.json"

COLLECTIONS = ("users", "conversations", "roles", "ads", "countryBans")


def initial_document():
    document = {name: [] for name in COLLECTIONS}
    document["systemSettings"] = copy.deepcopy(DEFAULT_SETTINGS)
    return document


def parse(raw):
    """Parse stored bytes into a document; anything but a JSON object is corrupt."""
    try:
        document = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise CorruptStoreError(cause=e) from e
    if not isinstance(document, dict):
        raise CorruptStoreError(cause=TypeError(f"expected a JSON object, got {type(document).__name__}"))
    return document


class DocumentStore:
    """Owns the single JSON file holding the whole application state."""

    def __init__(self, path=DB_PATH):
        self.path = Path(path)

    def init_storage(self):
        """Ensure the folder and the JSON file exist. Returns the new document, if one was created."""
        if self.path.exists():
            return None
        document = initial_document()
        self.replace(json.dumps(document, indent=2).encode("utf-8"))
        logger.info("Created new database file at %s", self.path)
        return document

    def read_bytes(self):
        self.init_storage()
        try:
            return self.path.read_bytes()
        except OSError as e:
            logger.error("Error reading database %s: %s", self.path, e)
            raise CorruptStoreError(cause=e) from e

    def load(self):
        raw = self.read_bytes()
        try:
            return parse(raw)
        except CorruptStoreError:
            logger.error("Database file %s is not a valid JSON object", self.path)
            raise

    def replace(self, raw):
        """Write ``raw`` verbatim as the new file contents.

        The bytes land in a sibling temp file first and are renamed over the
        target, so a failed write leaves the previous document in place.
        """
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", delete=False, dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(raw)
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error("Error writing database %s: %s", self.path, e)
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise WriteError(cause=e) from e
