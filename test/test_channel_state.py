from threading import Thread

from svh_driver.drivers.channel_state import ChannelEnableState


def test_defaults_to_disabled():
    state = ChannelEnableState()
    assert not state.enabled
    assert not state


def test_enable_disable():
    state = ChannelEnableState()
    state.enable()
    assert state.enabled
    state.disable()
    assert not state.enabled
    state.set(1)
    assert state.enabled is True


def test_disable_and_get_previous():
    state = ChannelEnableState(True)
    assert state.disable_and_get_previous() is True
    assert state.disable_and_get_previous() is False
    assert not state.enabled


def test_concurrent_writers_leave_a_boolean():
    state = ChannelEnableState()
    threads = [Thread(target=state.set, args=(i % 2 == 0,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert state.enabled in (True, False)
