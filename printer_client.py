import logging

import requests

logger = logging.getLogger(__name__)

JOB_NAME = "drawer-label"


class PrinterError(RuntimeError):
    """Raised when a label could not be sent to the printer."""


class PrinterClient:
    """Minimal wrapper submitting plain text jobs to a CUPS print queue."""

    def __init__(self, host, queue, port=631, timeout=15, virtual=False):
        self.host = (host or "").strip()
        self.queue = (queue or "").strip().strip("/")
        self.port = int(port or 631)
        self.timeout = timeout
        self.virtual = bool(virtual)
        if not self.virtual and (not self.host or not self.queue):
            raise ValueError("Printer host or queue name not set")
        self.session = requests.Session()

    @classmethod
    def from_config(cls, config, timeout=15):
        """Build a client from the stored printer settings mapping."""
        return cls(
            host=config.get("host"),
            queue=config.get("queue_name"),
            port=config.get("port") or 631,
            timeout=timeout,
            virtual=config.get("virtual_printing", False),
        )

    def close(self):
        self.session.close()

    @property
    def queue_url(self):
        return f"http://{self.host}:{self.port}/printers/{self.queue}"

    def _request(self, method, url, **kwargs):
        """Send a request to the print server.

        Any HTTP error or connection problem results in a ``PrinterError``.
        """
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return resp
        except requests.RequestException as exc:
            raise PrinterError(f"Printer request failed: {exc}") from exc

    def check_printer(self):
        """Make sure the configured queue exists."""
        self._request("GET", self.queue_url)
        return True

    def print_text(self, text):
        """Print ``text`` on a label.

        With virtual printing enabled nothing is sent and the returned
        mapping only carries the preview text.
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("Label text is empty")
        if self.virtual:
            logger.info("Virtual printing label %r", text)
            return {"success": True, "virtual": True, "text": text}
        self.check_printer()
        resp = self._request(
            "POST",
            f"{self.queue_url}/jobs",
            data={
                "job-name": JOB_NAME,
                "document-format": "text/plain",
                "document-content": text,
            },
        )
        logger.info("Sent label %r to %s", text, self.queue_url)
        job = {}
        if resp.text:
            try:
                job = resp.json()
            except ValueError:
                job = {}
        return {"success": True, "virtual": False, "text": text, "job": job}
