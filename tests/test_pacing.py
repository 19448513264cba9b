import asyncio
import unittest

from game import Pacer


class TestPacer(unittest.IsolatedAsyncioTestCase):
    async def test_given_zero_time_scale_when_waiting_then_returns_at_once(self):
        pacer = Pacer(0)
        await asyncio.wait_for(pacer.wait(10), timeout=1)

    async def test_given_paused_when_waiting_then_held_until_resume(self):
        pacer = Pacer(0)
        pacer.pause()
        self.assertTrue(pacer.paused)
        task = asyncio.ensure_future(pacer.wait())
        for _ in range(5):
            await asyncio.sleep(0)
        self.assertFalse(task.done())
        pacer.resume()
        await asyncio.wait_for(task, timeout=1)
        self.assertFalse(pacer.paused)

    async def test_given_several_waiters_when_resuming_then_all_released(self):
        pacer = Pacer(0)
        pacer.pause()
        tasks = [asyncio.ensure_future(pacer.gate()) for _ in range(3)]
        await asyncio.sleep(0)
        pacer.resume()
        await asyncio.wait_for(asyncio.gather(*tasks), timeout=1)

    async def test_given_time_scale_when_waiting_then_real_delay_elapses(self):
        pacer = Pacer(1.0)
        loop = asyncio.get_running_loop()
        start = loop.time()
        await pacer.wait(0.05)
        self.assertGreaterEqual(loop.time() - start, 0.04)


class TestPacerAcrossLoops(unittest.TestCase):
    def test_given_resume_between_runs_when_waiting_in_new_loop_then_not_stuck(self):
        pacer = Pacer(0)
        asyncio.run(pacer.wait())
        pacer.pause()
        pacer.resume()
        asyncio.run(asyncio.wait_for(pacer.wait(), timeout=1))


if __name__ == '__main__':
    unittest.main()
