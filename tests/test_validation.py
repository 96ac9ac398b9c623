import os
import sys
import unittest
from datetime import timedelta

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("VRPA_DATABASE_URL", "sqlite://")

from factories import BASE_TIME, FixedClock, checkout_request, make_device, make_member
from vrpa.core.errors import ConflictError, NotFoundError, ValidationFailure
from vrpa.repositories.memory import InMemoryRepositories
from vrpa.schemas.checkout import CheckoutCreate, ReturnRequest, ScheduleCreate
from vrpa.schemas.device import DeviceCreate, DeviceType
from vrpa.schemas.team_member import TeamMemberCreate
from vrpa.services.lifecycle import DeviceLifecycleManager, DeviceLockRegistry
from vrpa.services.validation import (
    validate_checkout,
    validate_device,
    validate_return,
    validate_schedule,
    validate_team_member,
)

def _device_form(**overrides):
    data = {
        "name": "KALI-VM-002",
        "type": DeviceType.VMWARE,
        "ip_address": "192.168.1.101",
        "root_password": "toor",
        "sharefile_link": "https://share.example.com/d/def456",
    }
    data.update(overrides)
    return DeviceCreate(**data)

class TestValidateDevice(unittest.TestCase):

    def setUp(self):
        self.repos = InMemoryRepositories()
        self.existing = make_device(ip_address="192.168.1.100")
        self.repos.devices.add(self.existing)

    def test_valid_device_passes(self):
        validate_device(_device_form(), self.repos)

    def test_missing_fields_reported_together(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_device(DeviceCreate(), self.repos)
        self.assertEqual(
            set(ctx.exception.errors),
            {"name", "ip_address", "root_password", "sharefile_link"}
        )

    def test_malformed_ip_rejected(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_device(_device_form(ip_address="300.1.1.1"), self.repos)
        self.assertEqual(ctx.exception.errors["ip_address"], "Invalid IP address format")

    def test_duplicate_ip_rejected(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_device(_device_form(ip_address="192.168.1.100"), self.repos)
        self.assertEqual(ctx.exception.errors["ip_address"], "IP address already in use")

    def test_editing_device_keeps_own_ip(self):
        updated = self.existing.model_copy(update={"name": "Renamed"})
        validate_device(updated, self.repos, exclude_device_id=self.existing.id)

    def test_custom_type_requires_label(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_device(_device_form(type=DeviceType.CUSTOM), self.repos)
        self.assertIn("custom_type", ctx.exception.errors)

        validate_device(_device_form(type=DeviceType.CUSTOM, custom_type="Proxmox"), self.repos)

class TestValidateCheckoutAndSchedule(unittest.TestCase):

    def setUp(self):
        self.clock = FixedClock()
        self.repos = InMemoryRepositories()
        self.manager = DeviceLifecycleManager(
            self.repos, clock=self.clock, retention_days=30, locks=DeviceLockRegistry()
        )
        self.member = make_member()
        self.repos.team_members.add(self.member)
        self.device = make_device()
        self.repos.devices.add(self.device)

    def _checkout_form(self, **overrides):
        data = {
            "team_member_id": self.member.id,
            "client_name": "  Acme Corporation ",
            "expected_return_date": BASE_TIME + timedelta(days=4),
        }
        data.update(overrides)
        return CheckoutCreate(**data)

    def _schedule_form(self, days_ahead, length=3, **overrides):
        data = {
            "team_member_id": self.member.id,
            "client_name": "Globex",
            "scheduled_date": BASE_TIME + timedelta(days=days_ahead),
            "expected_end_date": BASE_TIME + timedelta(days=days_ahead + length),
        }
        data.update(overrides)
        return ScheduleCreate(**data)

    def test_checkout_resolves_member_name_and_defaults_date(self):
        request = validate_checkout(self.device, self._checkout_form(), self.repos, clock=self.clock)

        self.assertEqual(request.team_member_name, "Sarah Johnson")
        self.assertEqual(request.client_name, "Acme Corporation")
        self.assertEqual(request.checkout_date, BASE_TIME)
        self.assertIsNone(request.notes)

    def test_checkout_of_checked_out_device_conflicts(self):
        self.manager.checkout(self.device.id, checkout_request(self.member))
        stored = self.repos.devices.get(self.device.id)

        with self.assertRaises(ConflictError):
            validate_checkout(stored, self._checkout_form(), self.repos, clock=self.clock)

    def test_return_date_must_follow_checkout_date(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_checkout(self.device, self._checkout_form(expected_return_date=BASE_TIME), self.repos, clock=self.clock)
        self.assertEqual(ctx.exception.errors["expected_return_date"], "Return date must be after checkout date")

    def test_checkout_missing_fields(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_checkout(self.device, CheckoutCreate(), self.repos, clock=self.clock)
        self.assertEqual(set(ctx.exception.errors), {"team_member_id", "client_name", "expected_return_date"})

    def test_checkout_unknown_member(self):
        with self.assertRaises(NotFoundError):
            validate_checkout(self.device, self._checkout_form(team_member_id="missing"), self.repos, clock=self.clock)

    def test_schedule_on_expected_return_day_accepted(self):
        """Checked out on day 1 until day 5: day 5 accepted, day 4 rejected"""
        self.manager.checkout(self.device.id, checkout_request(self.member))
        stored = self.repos.devices.get(self.device.id)

        request = validate_schedule(stored, self._schedule_form(4), self.repos, clock=self.clock)
        self.assertEqual(request.scheduled_date, BASE_TIME + timedelta(days=4))

        with self.assertRaises(ValidationFailure) as ctx:
            validate_schedule(stored, self._schedule_form(3), self.repos, clock=self.clock)
        self.assertEqual(ctx.exception.errors["scheduled_date"], "Device is not available on this date")

    def test_schedule_must_be_in_future(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_schedule(self.device, self._schedule_form(-1), self.repos, clock=self.clock)
        self.assertEqual(ctx.exception.errors["scheduled_date"], "Scheduled date must be in the future")

    def test_schedule_end_after_start(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_schedule(self.device, self._schedule_form(5, length=0), self.repos, clock=self.clock)
        self.assertEqual(ctx.exception.errors["expected_end_date"], "End date must be after start date")

    def test_failed_validation_leaves_device_unchanged(self):
        before = self.repos.devices.get(self.device.id)
        with self.assertRaises(ValidationFailure):
            validate_schedule(before, self._schedule_form(-1), self.repos, clock=self.clock)
        self.assertEqual(self.repos.devices.get(self.device.id), before)

class TestValidateReturn(unittest.TestCase):

    def setUp(self):
        self.clock = FixedClock()
        self.repos = InMemoryRepositories()
        self.manager = DeviceLifecycleManager(
            self.repos, clock=self.clock, retention_days=30, locks=DeviceLockRegistry()
        )
        self.device = make_device()
        self.repos.devices.add(self.device)

    def _checked_out(self, checkout_date=BASE_TIME):
        self.manager.checkout(self.device.id, checkout_request(
            checkout_date=checkout_date, expected_return_date=checkout_date + timedelta(days=4)
        ))
        return self.repos.devices.get(self.device.id)

    def test_defaults_to_now(self):
        device = self._checked_out()
        self.clock.advance(days=2)
        self.assertEqual(validate_return(device, None, clock=self.clock), BASE_TIME + timedelta(days=2))

    def test_return_on_checkout_date_accepted(self):
        device = self._checked_out()
        self.assertEqual(validate_return(device, ReturnRequest(actual_return_date=BASE_TIME), clock=self.clock), BASE_TIME)

    def test_return_before_checkout_date_rejected(self):
        device = self._checked_out()
        with self.assertRaises(ValidationFailure) as ctx:
            validate_return(device, ReturnRequest(actual_return_date=BASE_TIME - timedelta(days=10)), clock=self.clock)
        self.assertEqual(ctx.exception.errors["actual_return_date"], "Return date cannot be before checkout date")
        self.assertTrue(self.repos.devices.get(self.device.id).current_checkout.is_active)

    def test_future_checkout_returned_now_rejected(self):
        device = self._checked_out(checkout_date=BASE_TIME + timedelta(days=3))
        with self.assertRaises(ValidationFailure):
            validate_return(device, ReturnRequest(), clock=self.clock)

    def test_device_without_checkout_passes(self):
        self.assertEqual(validate_return(self.device, None, clock=self.clock), BASE_TIME)

class TestValidateTeamMember(unittest.TestCase):

    def test_valid_member(self):
        validate_team_member(TeamMemberCreate(name="Emily Davis", email="emily.davis@company.com"))

    def test_invalid_email(self):
        for email in ["emily", "emily@company", "emily @company.com", "@company.com"]:
            with self.subTest(email=email):
                with self.assertRaises(ValidationFailure) as ctx:
                    validate_team_member(TeamMemberCreate(name="Emily Davis", email=email))
                self.assertEqual(ctx.exception.errors["email"], "Please enter a valid email address")

    def test_missing_name_and_email(self):
        with self.assertRaises(ValidationFailure) as ctx:
            validate_team_member(TeamMemberCreate())
        self.assertEqual(set(ctx.exception.errors), {"name", "email"})

if __name__ == '__main__':
    unittest.main()
