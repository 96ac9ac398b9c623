import os
import sys
import tempfile
import unittest
from datetime import timedelta

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("VRPA_DATABASE_URL", "sqlite://")

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from factories import BASE_TIME, FixedClock, checkout_request, make_device, make_member, ping, schedule_request
from vrpa.database.connection import build_engine, init_database
from vrpa.repositories.sql import SqlRepositories
from vrpa.schemas.device import CheckoutStatus, DeviceStatus
from vrpa.services.lifecycle import DeviceLifecycleManager, DeviceLockRegistry

class TestSqlRepositories(unittest.TestCase):
    """Test cases for the SQLAlchemy backed repositories"""

    def setUp(self):
        self.engine = build_engine("sqlite://")
        init_database(bind=self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.session = self.Session()
        self.repos = SqlRepositories(self.session)

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    def _reopen(self):
        """Read back through a fresh session"""
        self.session.close()
        self.session = self.Session()
        self.repos = SqlRepositories(self.session)
        return self.repos

    def test_device_round_trip_with_embedded_checkout(self):
        device = make_device()
        self.repos.devices.add(device)
        self.repos.commit()

        manager = DeviceLifecycleManager(self.repos, clock=FixedClock(), locks=DeviceLockRegistry())
        checkout = manager.checkout(device.id, checkout_request())
        scheduled = manager.schedule(device.id, schedule_request())

        stored = self._reopen().devices.get(device.id)
        self.assertEqual(stored.checkout_status, CheckoutStatus.CHECKED_OUT)
        self.assertEqual(stored.current_checkout, checkout)
        self.assertEqual(stored.next_scheduled, scheduled)
        self.assertEqual(stored.created_at, BASE_TIME)
        self.assertEqual(stored.current_checkout.expected_return_date.tzinfo, BASE_TIME.tzinfo)

    def test_missing_device_is_none(self):
        self.assertIsNone(self.repos.devices.get("missing"))
        self.assertFalse(self.repos.devices.delete("missing"))

    def test_rollback_discards_uncommitted_changes(self):
        device = make_device()
        self.repos.devices.add(device)
        self.repos.commit()

        renamed = device.model_copy(update={"name": "Renamed"})
        self.repos.devices.save(renamed)
        self.repos.rollback()

        self.assertEqual(self._reopen().devices.get(device.id).name, "KALI-HV-001")

    def test_ping_listing_filters_and_orders(self):
        first = make_device()
        second = make_device(ip_address="192.168.1.101")
        for record in [
            ping(first.id, BASE_TIME + timedelta(hours=2), DeviceStatus.OFFLINE),
            ping(first.id, BASE_TIME, DeviceStatus.ONLINE),
            ping(second.id, BASE_TIME + timedelta(hours=1), DeviceStatus.UNKNOWN),
        ]:
            self.repos.pings.append(record)
        self.repos.commit()

        repos = self._reopen()
        self.assertEqual(len(repos.pings.list()), 3)
        self.assertEqual(
            [(p.timestamp, p.status) for p in repos.pings.list(device_id=first.id)],
            [(BASE_TIME, DeviceStatus.ONLINE), (BASE_TIME + timedelta(hours=2), DeviceStatus.OFFLINE)]
        )
        self.assertEqual(len(repos.pings.list(since=BASE_TIME + timedelta(hours=1))), 2)

    def test_prune_and_delete_for_device(self):
        device = make_device()
        self.repos.pings.append(ping(device.id, BASE_TIME - timedelta(days=40), DeviceStatus.ONLINE))
        self.repos.pings.append(ping(device.id, BASE_TIME, DeviceStatus.ONLINE))
        self.repos.pings.append(ping("other", BASE_TIME, DeviceStatus.ONLINE))
        self.repos.commit()

        self.assertEqual(self.repos.pings.prune_older_than(BASE_TIME - timedelta(days=30)), 1)
        self.assertEqual(self.repos.pings.delete_for_device(device.id), 1)
        self.repos.commit()

        remaining = self._reopen().pings.list()
        self.assertEqual([p.device_id for p in remaining], ["other"])

    def test_team_members(self):
        member = make_member()
        self.repos.team_members.add(member)
        self.repos.commit()

        updated = member.model_copy(update={"email": "s.johnson@company.com"})
        self.repos.team_members.save(updated)
        self.repos.commit()

        repos = self._reopen()
        self.assertEqual(repos.team_members.get(member.id), updated)
        self.assertTrue(repos.team_members.delete(member.id))
        repos.commit()
        self.assertEqual(self._reopen().team_members.list(), [])

    def test_email_template_replaced_wholesale(self):
        self.assertEqual(self.repos.email_template.get(), "")
        self.repos.email_template.put("first")
        self.repos.email_template.put("Link: [Insert Link Here]")
        self.repos.commit()

        self.assertEqual(self._reopen().email_template.get(), "Link: [Insert Link Here]")

class TestSqliteEngines(unittest.TestCase):
    """Connection pooling per kind of SQLite database"""

    def test_in_memory_database_shares_one_connection(self):
        engine = build_engine("sqlite://")
        self.assertIsInstance(engine.pool, StaticPool)
        engine.dispose()

    def test_file_database_keeps_sessions_isolated(self):
        with tempfile.TemporaryDirectory() as tmp:
            engine = build_engine(f"sqlite:///{os.path.join(tmp, 'vrpa.db')}")
            self.assertNotIsInstance(engine.pool, StaticPool)
            init_database(bind=engine)
            Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

            device = make_device()
            first = Session()
            SqlRepositories(first).devices.add(device)
            first.commit()

            # Flushed but uncommitted in one session, invisible to another
            writer = SqlRepositories(first)
            writer.devices.save(device.model_copy(update={"name": "Uncommitted"}))
            other = Session()
            self.assertEqual(SqlRepositories(other).devices.get(device.id).name, "KALI-HV-001")
            other.close()

            writer.rollback()
            first.close()

            fresh = Session()
            self.assertEqual(SqlRepositories(fresh).devices.get(device.id).name, "KALI-HV-001")
            fresh.close()
            engine.dispose()

if __name__ == '__main__':
    unittest.main()
