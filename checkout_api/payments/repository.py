"""
Accès données pour la feature 'payments': journal append-only des captures (JSON Lines).
"""
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from .errors import PersistenceError
from .summary import extract_capture_summary

logger = logging.getLogger(__name__)

_append_lock = threading.Lock()


def build_transaction_record(capture_payload: Dict[str, Any]) -> Dict[str, Any]:
    """TransactionRecord = CaptureSummary + loggedAt (UTC ISO-8601) + payload brut."""
    record = extract_capture_summary(capture_payload)
    record["loggedAt"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    record["raw"] = capture_payload
    return record


# module checkout_api.payments.repository
class TransactionRepository:
    """
    Journal des transactions: un enregistrement JSON par ligne, jamais réécrit.
    - Le fichier (et son dossier) est créé à la première capture.
    - Chaque ligne part en un seul os.write sur un descripteur O_APPEND: pas d'écriture partielle
      visible entre captures concurrentes.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def append(self, capture_payload: Dict[str, Any]) -> Dict[str, Any]:
        """Ajoute une capture au journal et retourne l'enregistrement écrit. Lève PersistenceError."""
        try:
            record = build_transaction_record(capture_payload)
            line = (json.dumps(record, ensure_ascii=False, default=str) + "\n").encode("utf-8")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with _append_lock:
                fd = os.open(str(self.path), os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
                try:
                    start = os.fstat(fd).st_size
                    written = os.write(fd, line)
                    if written != len(line):
                        # ligne incomplète retirée: la suivante repart sur une ligne propre
                        os.ftruncate(fd, start)
                finally:
                    os.close(fd)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to persist capture record: {e}") from e
        if written != len(line):
            raise PersistenceError(f"Short write on {self.path}: {written}/{len(line)} bytes")
        return record


def persist_capture(capture_payload: Dict[str, Any], repository: TransactionRepository) -> bool:
    """
    Enregistrement best-effort d'une capture.
    - Un échec est journalisé puis ignoré: une capture réussie ne doit jamais être
      signalée en échec au payeur à cause du journal.
    Retour: True si la ligne a été écrite.
    """
    try:
        record = repository.append(capture_payload)
    except PersistenceError:
        logger.exception("payments.repository.persist_capture failed path=%s", repository.path)
        return False
    logger.info(
        "payments.repository.persist_capture orderId=%s captureId=%s status=%s",
        record.get("orderId"), record.get("captureId"), record.get("status"),
    )
    return True
