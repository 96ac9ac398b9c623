#!/usr/bin/env python3
"""
Initialize the database with default and sample data
"""

import sys
import os
from datetime import timedelta
import random
import uuid

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from vrpa.database.connection import init_database, SessionLocal
from vrpa.database.seed import seed_defaults
from vrpa.repositories.sql import SqlRepositories
from vrpa.schemas.common import utcnow
from vrpa.schemas.device import Device, DeviceStatus, DeviceType
from vrpa.schemas.ping import PingRecord

SAMPLE_DEVICES = [
    {"name": "KALI-HV-001", "type": DeviceType.HYPER_V, "ip_address": "10.20.0.11"},
    {"name": "KALI-HV-002", "type": DeviceType.HYPER_V, "ip_address": "10.20.0.14"},
    {"name": "KALI-VM-001", "type": DeviceType.VMWARE, "ip_address": "10.20.0.20"},
    {"name": "NUC-PHY-001", "type": DeviceType.PHYSICAL, "ip_address": "10.20.0.31"},
    {"name": "DOCKER-001", "type": DeviceType.CUSTOM, "custom_type": "Docker Container", "ip_address": "10.20.0.42"},
]

def create_sample_data(with_pings: bool = True):
    """Create defaults plus sample devices and a week of ping history"""

    init_database()

    session = SessionLocal()
    try:
        seed_defaults(session)
        print("✅ Admin user, team members and email template ready")

        repos = SqlRepositories(session)
        existing = {device.ip_address for device in repos.devices.list()}
        now = utcnow()

        created = []
        for sample in SAMPLE_DEVICES:
            if sample["ip_address"] in existing:
                continue
            device = Device(
                id=str(uuid.uuid4()),
                root_password="changeme",
                sharefile_link=f"https://share.example.com/vrpa/{sample['name'].lower()}",
                created_at=now,
                updated_at=now,
                **sample
            )
            repos.devices.add(device)
            created.append(device)
        repos.commit()
        print(f"✅ {len(created)} sample devices created")

        if with_pings:
            # One ping every 30 minutes for the last 7 days
            for device in created:
                for i in range(7 * 48):
                    status = DeviceStatus.ONLINE if random.random() < 0.9 else random.choice(
                        [DeviceStatus.OFFLINE, DeviceStatus.UNKNOWN]
                    )
                    repos.pings.append(PingRecord(
                        device_id=device.id,
                        timestamp=now - timedelta(minutes=30 * i),
                        status=status,
                        response_time=random.uniform(5, 60) if status == DeviceStatus.ONLINE else None
                    ))
            repos.commit()
            print("✅ Sample ping history created")

        print("\n🎉 Database initialization complete!")
        print("Start the API with: uvicorn vrpa.main:app")

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        session.rollback()
        raise
    finally:
        session.close()

if __name__ == "__main__":
    create_sample_data(with_pings="--no-pings" not in sys.argv)
