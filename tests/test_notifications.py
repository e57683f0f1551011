from tourplanner.services.notifications import Notifier


def test_message_clears_after_display_time(scheduler):
    changes = []
    notifier = Notifier(display_seconds=5.0, scheduler=scheduler, on_change=changes.append)

    notifier.show("Saved")
    scheduler.advance(4.9)
    assert notifier.message == "Saved"

    scheduler.advance(0.1)
    assert notifier.message is None
    assert changes == ["Saved", None]


def test_second_message_wins_and_gets_full_time(scheduler):
    notifier = Notifier(display_seconds=5.0, scheduler=scheduler)

    notifier.show("first")
    scheduler.advance(3.0)
    notifier.show("second")
    assert notifier.message == "second"

    # the first message's timer would have fired here
    scheduler.advance(2.5)
    assert notifier.message == "second"

    scheduler.advance(2.5)
    assert notifier.message is None


def test_stale_timer_does_not_clear_newer_message(scheduler):
    notifier = Notifier(display_seconds=5.0, scheduler=scheduler)
    notifier.show("first")
    stale = scheduler.timers[0]
    notifier.show("second")

    # a timer that fires despite being cancelled is ignored
    stale.callback()

    assert notifier.message == "second"


def test_clear_dismisses_immediately(scheduler):
    changes = []
    notifier = Notifier(display_seconds=5.0, scheduler=scheduler, on_change=changes.append)
    notifier.show("hello")

    notifier.clear()
    notifier.clear()

    assert notifier.message is None
    assert changes == ["hello", None]
    assert scheduler.timers[0].cancelled
