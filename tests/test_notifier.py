"""Tests for the missed-log reminder and cycle reset jobs."""

import asyncio
from datetime import date, datetime, timedelta, timezone

from fitlog.services.notifier import CycleNotifier

from conftest import EPOCH, FakeSender

EVENING = datetime(2024, 3, 15, 20, 30, tzinfo=timezone.utc)


def run(coro):
    return asyncio.run(coro)


class TestDailyCheck:
    def test_skipped_before_cutoff(self, store, notifier, sender):
        store.add_user()
        assert run(notifier.run_daily_check(EVENING.replace(hour=19, minute=59))) == 0
        assert sender.sent == []

    def test_reminds_users_without_log_today(self, store, notifier, sender):
        idle = store.add_user("Sam", current_streak=4, longest_streak=7, last_upload_date=date(2024, 3, 14))
        store.add_user("Never")
        store.add_user("Active", current_streak=1, longest_streak=1, last_upload_date=date(2024, 3, 15))

        assert run(notifier.run_daily_check(EVENING)) == 2

        recipients = sorted(to for to, _, _ in sender.sent)
        assert recipients == ["never@example.com", "sam@example.com"]
        subject = next(s for to, s, _ in sender.sent if to == idle.email)
        assert subject == "Don't break your 4-day streak, Sam!"
        assert store.has_sent(idle.id, "missed_log", date(2024, 3, 15))

    def test_second_run_same_day_sends_nothing(self, store, notifier, sender):
        store.add_user(last_upload_date=date(2024, 3, 10), current_streak=1, longest_streak=1)

        run(notifier.run_daily_check(EVENING))
        run(notifier.run_daily_check(EVENING + timedelta(hours=2)))

        assert len(sender.sent) == 1
        assert len(store.notifications) == 1

    def test_next_day_sends_again(self, store, notifier, sender):
        store.add_user()
        run(notifier.run_daily_check(EVENING))
        run(notifier.run_daily_check(EVENING + timedelta(days=1)))
        assert len(sender.sent) == 2

    def test_reminders_disabled(self, store, notifier, sender):
        store.add_user(motivational=False)
        run(notifier.run_daily_check(EVENING))
        assert sender.sent == []

    def test_delivery_failure_is_isolated(self, store, engine, insights, settings):
        store.add_user("Broken")
        store.add_user("Fine")
        sender = FakeSender(fail_for={"broken@example.com"})
        notifier = CycleNotifier(store, store, engine, insights, sender, settings)

        assert run(notifier.run_daily_check(EVENING)) == 1
        assert [to for to, _, _ in sender.sent] == ["fine@example.com"]
        # No marker for the failed user, so a later run can retry
        assert len(store.notifications) == 1

    def test_cutoff_uses_reference_timezone(self, store, engine, insights, sender, settings):
        ny_settings = settings.model_copy(update={"timezone": "America/New_York"})
        notifier = CycleNotifier(store, store, engine, insights, sender, ny_settings)
        store.add_user()

        # 20:30 UTC is mid-afternoon in New York
        assert run(notifier.run_daily_check(EVENING)) == 0
        assert run(notifier.run_daily_check(datetime(2024, 3, 16, 1, 0, tzinfo=timezone.utc))) == 1


class TestCycleReset:
    def test_resets_due_users_and_sends_summary(self, store, notifier, sender):
        low = store.add_user("Low", current_streak=3, longest_streak=8)
        high = store.add_user("High", current_streak=25, longest_streak=25)
        fresh = store.add_user("Fresh", current_streak=2, longest_streak=2,
                               last_streak_reset=EPOCH + timedelta(days=20))
        now = EPOCH + timedelta(days=30)
        for i in range(25):
            store.add_log(high.id, now - timedelta(days=i), category="meal" if i % 3 else "workout")

        assert run(notifier.run_cycle_reset(now)) == 2

        assert store.get_streak_state(low.id).current_streak == 0
        assert store.get_streak_state(high.id).current_streak == 25
        assert store.get_streak_state(fresh.id).last_streak_reset == EPOCH + timedelta(days=20)
        for user in (low, high):
            assert store.get_streak_state(user.id).last_streak_reset == now

        subjects = {to: subject for to, subject, _ in sender.sent}
        assert subjects == {
            "low@example.com": "Your weekly progress summary, Low!",
            "high@example.com": "Your weekly progress summary, High!",
        }

    def test_alerts_disabled_still_resets(self, store, notifier, sender):
        user = store.add_user(alerts=False, current_streak=3, longest_streak=3)
        now = EPOCH + timedelta(days=31)

        run(notifier.run_cycle_reset(now))

        assert sender.sent == []
        assert store.get_streak_state(user.id).current_streak == 0

    def test_send_failure_does_not_undo_reset(self, store, engine, insights, settings):
        broken = store.add_user("Broken", current_streak=3, longest_streak=3)
        fine = store.add_user("Fine", current_streak=3, longest_streak=3)
        sender = FakeSender(fail_for={"broken@example.com"})
        notifier = CycleNotifier(store, store, engine, insights, sender, settings)
        now = EPOCH + timedelta(days=30)

        assert run(notifier.run_cycle_reset(now)) == 2

        assert store.get_streak_state(broken.id).last_streak_reset == now
        assert store.get_streak_state(fine.id).last_streak_reset == now
        assert [to for to, _, _ in sender.sent] == ["fine@example.com"]

    def test_run_all(self, store, notifier, sender):
        store.add_user("Idle")
        now = EPOCH + timedelta(days=30, hours=21)

        run(notifier.run_all(now))

        subjects = sorted(subject for _, subject, _ in sender.sent)
        assert subjects == ["Don't break your 0-day streak, Idle!", "Your weekly progress summary, Idle!"]
