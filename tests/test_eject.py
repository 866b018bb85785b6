# tests/test_eject.py
import pytest

from ejectd.eject import DriveActions, DriveEjector, EjectState


@pytest.fixture
def quiet_ejector(fake_runner, queries, settings):
    """Ejector without a reporter."""
    return DriveEjector(queries, DriveActions(fake_runner, settings))


def power_off_calls(fake_runner):
    return [c for c in fake_runner.calls_to("udisksctl") if c[1] == "power-off"]


class TestEjectSequence:
    def test_mounted_partition_unmounted_then_powered_off(self, fake_runner, quiet_ejector):
        """Scenario B: /dev/sdb1 on /media/usb, both commands succeed."""
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "/media/usb"})
        fake_runner.set_unmount("/dev/sdb1", 0)
        fake_runner.set_power_off("/dev/sdb", 0)

        result = quiet_ejector.eject("/dev/sdb")

        assert result.succeeded
        assert not result.partial_failure
        assert result.state is EjectState.DONE
        assert fake_runner.calls_to("udisksctl") == [
            ("udisksctl", "unmount", "-b", "/dev/sdb1"),
            ("udisksctl", "power-off", "-b", "/dev/sdb"),
        ]
        assert [(p.partition, p.mount_point, p.unmounted) for p in result.partitions] == [
            ("/dev/sdb1", "/media/usb", True)
        ]

    def test_failed_unmount_blocks_power_off(self, fake_runner, quiet_ejector):
        """Scenario C: the unmount exits non-zero, power-off is never attempted."""
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "/media/usb"})
        fake_runner.set_unmount("/dev/sdb1", 1)

        result = quiet_ejector.eject("/dev/sdb")

        assert result.partial_failure
        assert not result.succeeded
        assert not result.power_off_attempted
        assert result.state is EjectState.ABORTED_BEFORE_POWER_OFF
        assert result.failed_partitions == ["/dev/sdb1"]
        assert power_off_calls(fake_runner) == []

    def test_every_partition_is_attempted_after_a_failure(self, fake_runner, quiet_ejector):
        fake_runner.add_drive(
            "/dev/sdb",
            partitions={"sdb1": "/media/a", "sdb2": "/media/b", "sdb3": "/media/c"},
        )
        fake_runner.set_unmount("/dev/sdb1", 1)

        result = quiet_ejector.eject("/dev/sdb")

        assert [c[3] for c in fake_runner.calls_to("udisksctl")] == [
            "/dev/sdb1",
            "/dev/sdb2",
            "/dev/sdb3",
        ]
        assert result.failed_partitions == ["/dev/sdb1"]
        assert result.state is EjectState.ABORTED_BEFORE_POWER_OFF

    def test_unmounted_partitions_are_skipped(self, fake_runner, quiet_ejector):
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "", "sdb2": "/media/b"})

        result = quiet_ejector.eject("/dev/sdb")

        assert not fake_runner.called("udisksctl", "unmount", "-b", "/dev/sdb1")
        assert fake_runner.called("udisksctl", "unmount", "-b", "/dev/sdb2")
        assert result.succeeded

    @pytest.mark.parametrize("partitions", [{}, {"sdb1": ""}, {"sdb1": "", "sdb2": ""}])
    def test_nothing_mounted_still_powers_off(self, fake_runner, quiet_ejector, partitions):
        fake_runner.add_drive("/dev/sdb", partitions=partitions)

        result = quiet_ejector.eject("/dev/sdb")

        assert result.succeeded
        assert result.partitions == []
        assert power_off_calls(fake_runner) == [("udisksctl", "power-off", "-b", "/dev/sdb")]

    def test_power_off_failure(self, fake_runner, quiet_ejector):
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "/media/usb"})
        fake_runner.set_power_off("/dev/sdb", 1)

        result = quiet_ejector.eject("/dev/sdb")

        assert result.state is EjectState.POWER_OFF_FAILED
        assert result.power_off_attempted
        assert not result.succeeded
        assert not result.partial_failure
        assert len(power_off_calls(fake_runner)) == 1

    def test_missing_udisksctl_counts_as_failure(self, fake_runner, quiet_ejector):
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "/media/usb"})
        fake_runner.set_unmount("/dev/sdb1", 127)

        result = quiet_ejector.eject("/dev/sdb")

        assert result.partial_failure

    def test_result_state_is_terminal(self, fake_runner, quiet_ejector):
        fake_runner.add_drive("/dev/sdb")
        assert quiet_ejector.eject("/dev/sdb").state.is_terminal
        assert not EjectState.UNMOUNTING.is_terminal


class TestEjectReporting:
    def test_progress_written_to_display(self, fake_runner, ejector, output):
        fake_runner.add_drive("/dev/sdb", partitions={"sdb1": "/media/usb", "sdb2": "/mnt/x"})
        fake_runner.set_unmount("/dev/sdb2", 1)

        ejector.eject("/dev/sdb")

        text = output()
        assert "Unmounting /dev/sdb1 (/media/usb)..." in text
        assert "Unmounting /dev/sdb2 (/mnt/x)..." in text
        assert "Success" in text
        assert "Failed" in text
        assert "Powering off" not in text

    def test_power_off_announced(self, fake_runner, ejector, output):
        fake_runner.add_drive("/dev/sdb")
        ejector.eject("/dev/sdb")
        assert "Powering off the drive..." in output()
