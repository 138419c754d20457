"""
Backing stores for the project collection
"""

import json
import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from config.config import StoreConfig
from models.project import Project

logger = logging.getLogger(__name__)


class StoreBackend(ABC):
    """Persistence interface the ProjectStore depends on"""

    name = "backend"

    @abstractmethod
    def open(self) -> Dict[str, Any]:
        """Make the backend usable; raises when it is not reachable"""

    @abstractmethod
    def list_projects(self) -> List[Project]:
        """Return every stored project in display order"""

    @abstractmethod
    def add_project(self, data: Dict[str, Any]) -> str:
        """Insert a new document and return its id"""

    @abstractmethod
    def update_project(self, project_id: str, data: Dict[str, Any]):
        """Overwrite the given fields of an existing document"""

    @abstractmethod
    def delete_project(self, project_id: str):
        """Delete a document by id"""


class RemoteDocumentBackend(StoreBackend):
    """Document store reached over HTTP, one collection per resource"""

    name = "remote"

    def __init__(
        self,
        base_url: str,
        collection: str = "projects",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.collection = collection
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}/{self.collection}"

    def _document_url(self, project_id: str) -> str:
        return f"{self.collection_url}/{project_id}"

    def open(self) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        response.raise_for_status()
        return {"backend": self.name, "url": self.base_url, "collection": self.collection}

    def list_projects(self) -> List[Project]:
        response = self.session.get(
            self.collection_url,
            params={"orderBy": "createdAt", "direction": "desc"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict) or not isinstance(body.get("documents", []), list):
            raise ValueError("Store response is not a document list")

        projects = []
        for doc in body.get("documents", []):
            if not isinstance(doc, dict) or "id" not in doc or not isinstance(doc.get("data"), dict):
                raise ValueError(f"Malformed document in store response: {doc!r}")
            projects.append(Project.from_record(doc["id"], doc["data"]))
        return projects

    def add_project(self, data: Dict[str, Any]) -> str:
        response = self.session.post(self.collection_url, json=data, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if "id" not in payload:
            raise ValueError("Store response did not include a document id")
        return str(payload["id"])

    def update_project(self, project_id: str, data: Dict[str, Any]):
        response = self.session.patch(
            self._document_url(project_id), json=data, timeout=self.timeout
        )
        response.raise_for_status()

    def delete_project(self, project_id: str):
        response = self.session.delete(
            self._document_url(project_id), timeout=self.timeout
        )
        response.raise_for_status()


class LocalStorageBackend(StoreBackend):
    """Key-value storage file holding the whole list as one serialized value"""

    name = "local"

    def __init__(self, storage_path: str, key: str = "portfolioProjects"):
        self.storage_path = Path(storage_path)
        self.key = key
        self._lock = threading.Lock()

    def open(self) -> Dict[str, Any]:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        # Fail early on an unreadable file
        self._read_storage()
        return {"backend": self.name, "path": str(self.storage_path), "key": self.key}

    def _read_storage(self) -> Dict[str, str]:
        if not self.storage_path.exists():
            return {}
        with open(self.storage_path, "r", encoding="utf-8") as f:
            storage = json.load(f)
        if not isinstance(storage, dict):
            raise ValueError(f"Storage file {self.storage_path} does not hold an object")
        return storage

    def _read_records(self) -> List[Dict[str, Any]]:
        raw = self._read_storage().get(self.key)
        if not raw:
            return []
        if not isinstance(raw, str):
            raise ValueError(f"Value under {self.key} is not a serialized list")

        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError(f"Value under {self.key} is not a list")
        for record in records:
            if not isinstance(record, dict) or "id" not in record:
                raise ValueError(f"Malformed record under {self.key}: {record!r}")
        return records

    def _write_records(self, records: List[Dict[str, Any]]):
        storage = self._read_storage()
        storage[self.key] = json.dumps(records)

        tmp_path = self.storage_path.with_suffix(self.storage_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(storage, f, indent=2)
        os.replace(tmp_path, self.storage_path)

    def list_projects(self) -> List[Project]:
        with self._lock:
            return [Project.from_dict(record) for record in self._read_records()]

    def add_project(self, data: Dict[str, Any]) -> str:
        project_id = str(uuid.uuid4())
        with self._lock:
            records = self._read_records()
            # Newest first, the order the sections display
            records.insert(0, {"id": project_id, **data})
            self._write_records(records)
        return project_id

    def update_project(self, project_id: str, data: Dict[str, Any]):
        with self._lock:
            records = self._read_records()
            for record in records:
                if record.get("id") == project_id:
                    record.update(data)
                    break
            else:
                raise KeyError(project_id)
            self._write_records(records)

    def delete_project(self, project_id: str):
        with self._lock:
            records = self._read_records()
            remaining = [r for r in records if r.get("id") != project_id]
            if len(remaining) == len(records):
                raise KeyError(project_id)
            self._write_records(remaining)


def create_backend(store_config: StoreConfig) -> StoreBackend:
    """Build the backend selected by configuration"""
    if store_config.backend == "remote":
        logger.info(f"Using remote document store at {store_config.remote_url}")
        return RemoteDocumentBackend(
            store_config.remote_url,
            collection=store_config.collection,
            timeout=store_config.request_timeout,
        )
    logger.info(f"Using local storage at {store_config.local_storage_path}")
    return LocalStorageBackend(
        store_config.local_storage_path, key=store_config.local_storage_key
    )
