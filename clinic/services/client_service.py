# services/client_service.py
import time
from datetime import datetime

from clinic import logger
from ..errors import BackendError, RecordActionError
from ..utils.helpers import generate_id


class ClientService:

    @staticmethod
    def save_client(state, data, now=None):
        """
        Create or fully replace a client. Consent is re-stamped with the save
        time whenever it is given and cleared when it is withdrawn.
        """
        record = dict(data)
        if record.get('lgpd_consent'):
            record['lgpd_timestamp'] = (now or datetime.now()).isoformat(timespec='seconds')
        else:
            record['lgpd_timestamp'] = None
        saved = state.clients.save(record)
        logger.info(f"Client saved: {saved['id']}")
        return saved

    @staticmethod
    def search(state, term=None, status=None):
        """Name or CPF substring plus an optional status filter"""
        if status == 'ALL':
            status = None
        return state.clients.filter(term, fields=('name', 'cpf'), status=status)

    @staticmethod
    def add_clinical_evolution(state, client_id, entry, professional_name):
        """Prepend a clinical history entry and persist the whole client"""
        client = state.clients.require(client_id)
        evolution = {
            'id': generate_id('h'),
            'date': entry['date'],
            'procedure': entry['procedure'],
            'notes': entry.get('notes', ''),
            'professional_name': professional_name,
            'attachments': list(entry.get('attachments') or []),
        }
        client['clinical_history'] = [evolution] + list(client.get('clinical_history') or [])
        saved = state.clients.save(client)
        logger.info(f"Clinical evolution {evolution['id']} added to client {client_id}")
        return saved

    @staticmethod
    def upload_photos(state, client_id, files, bucket):
        """
        Upload every file under ``<client_id>/<timestamp>-<filename>``.

        Returns:
            list[str]: public URLs, in upload order
        """
        state.clients.require(client_id)
        urls = []
        for upload in files:
            path = f"{client_id}/{int(time.time() * 1000)}-{upload.filename}"
            try:
                urls.append(state.backend.files.upload(bucket, path, upload.stream, upload.mimetype))
            except BackendError as e:
                logger.error(f"Photo upload failed for client {client_id}: {e.message}")
                raise RecordActionError("Erro ao fazer upload da imagem.", details=e.message) from e
        return urls
