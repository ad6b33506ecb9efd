import json
import unittest
from unittest import mock

from apps.common import views

DB_OK = {"status": "ok", "latency_ms": 0.8}


class ReadinessProbeTests(unittest.TestCase):
    def _call(self):
        response = views.ready_health(None)
        return response.status_code, json.loads(response.content)

    def test_liveness_reports_alive(self):
        response = views.live_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content), {"status": "alive"})

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch("apps.common.views._db_check", return_value=DB_OK)
    def test_redis_is_skipped_without_url(self, _db, _getenv):
        status_code, payload = self._call()
        self.assertEqual(status_code, 200)
        self.assertEqual(payload["status"], "ok")
        self.assertEqual(payload["checks"]["database"], DB_OK)
        self.assertEqual(payload["checks"]["redis"]["status"], "skipped")

    @mock.patch("apps.common.views.os.getenv", return_value="redis://cache:6379/1")
    @mock.patch("apps.common.views._redis_ping", return_value={"status": "ok"})
    @mock.patch("apps.common.views._db_check", return_value=DB_OK)
    def test_ready_when_both_dependencies_answer(self, _db, redis_ping, _getenv):
        status_code, payload = self._call()
        self.assertEqual(status_code, 200)
        self.assertEqual(payload["checks"]["redis"], {"status": "ok"})
        redis_ping.assert_called_once_with("redis://cache:6379/1")

    @mock.patch("apps.common.views.os.getenv", return_value="redis://cache:6379/1")
    @mock.patch(
        "apps.common.views._redis_ping",
        return_value={"status": "fail", "error": "connection refused"},
    )
    @mock.patch("apps.common.views._db_check", return_value=DB_OK)
    def test_redis_failure_degrades_readiness(self, _db, _redis, _getenv):
        status_code, payload = self._call()
        self.assertEqual(status_code, 503)
        self.assertEqual(payload["status"], "degraded")

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch(
        "apps.common.views._db_check", return_value={"status": "fail", "error": "down"}
    )
    def test_database_failure_degrades_readiness(self, _db, _getenv):
        status_code, payload = self._call()
        self.assertEqual(status_code, 503)
        self.assertEqual(payload["checks"]["database"]["error"], "down")

    @mock.patch("apps.common.views.redis_lib", None)
    def test_redis_ping_skipped_without_library(self):
        self.assertEqual(views._redis_ping("redis://x")["status"], "skipped")

    def test_redis_ping_reports_failure_from_client(self):
        client = mock.Mock()
        client.ping.side_effect = ConnectionError("refused")
        fake_lib = mock.Mock()
        fake_lib.from_url.return_value = client
        with mock.patch("apps.common.views.redis_lib", fake_lib):
            result = views._redis_ping("redis://x", timeout=0.1)
        self.assertEqual(result, {"status": "fail", "error": "refused"})
        fake_lib.from_url.assert_called_once_with(
            "redis://x", socket_connect_timeout=0.1, socket_timeout=0.1
        )
