from unittest import TestCase
import logging
import unittest

import numpy as np

import keytensor
from keytensor import ExecutionContext, KeyTensorConfig, configure_logging
from keytensor.infrastructure.driver import CpuDriver


class TestKeyTensorConfig(TestCase):

    def test_defaults(self):
        config = KeyTensorConfig.from_env({})
        self.assertEqual(config.default_datatype, np.dtype(np.float64))
        self.assertEqual(config.cpu_device_count, 1)
        self.assertFalse(config.debug)

    def test_reads_environment_mapping(self):
        config = KeyTensorConfig.from_env(
            {
                "KEYTENSOR_DATATYPE": "float32",
                "KEYTENSOR_CPU_DEVICES": "3",
                "KEYTENSOR_DEBUG": "1",
            }
        )
        self.assertEqual(config.default_datatype, np.dtype(np.float32))
        self.assertEqual(config.cpu_device_count, 3)
        self.assertTrue(config.debug)

    def test_falsy_debug_values(self):
        for value in ("0", "", "false", "False"):
            with self.subTest(value=value):
                self.assertFalse(
                    KeyTensorConfig.from_env({"KEYTENSOR_DEBUG": value}).debug
                )

    def test_invalid_values_raise_value_error(self):
        with self.assertRaises(ValueError):
            KeyTensorConfig.from_env({"KEYTENSOR_DATATYPE": "not-a-dtype"})
        with self.assertRaises(ValueError):
            KeyTensorConfig.from_env({"KEYTENSOR_CPU_DEVICES": "many"})
        with self.assertRaises(ValueError):
            KeyTensorConfig.from_env({"KEYTENSOR_CPU_DEVICES": "0"})

    def test_config_is_frozen(self):
        config = KeyTensorConfig()
        with self.assertRaises(Exception):
            config.debug = True


class TestConfigureLogging(TestCase):

    def setUp(self):
        self.logger = logging.getLogger("keytensor")
        self._level = self.logger.level

    def tearDown(self):
        self.logger.setLevel(self._level)

    def test_debug_flag_sets_debug_level(self):
        logger = configure_logging(KeyTensorConfig(debug=True))
        self.assertIs(logger, self.logger)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_default_is_warning(self):
        configure_logging(KeyTensorConfig())
        self.assertEqual(self.logger.level, logging.WARNING)

    def test_package_installs_null_handler(self):
        self.assertTrue(
            any(isinstance(h, logging.NullHandler) for h in self.logger.handlers)
        )

    def test_dispatch_decisions_are_logged_at_debug(self):
        configure_logging(KeyTensorConfig(debug=True))
        ctx = ExecutionContext.create(config=KeyTensorConfig())
        t = keytensor.Tensor.new(ctx, (4,))
        with self.assertLogs("keytensor", level="DEBUG") as captured:
            t.fill(ctx, 1.0)
        self.assertTrue(any("memset" in line for line in captured.output))


class TestExecutionContext(TestCase):

    def test_create_from_config(self):
        config = KeyTensorConfig(default_datatype=np.float32, cpu_device_count=2)
        ctx = ExecutionContext.create(config=config)
        self.assertIsInstance(ctx.driver, CpuDriver)
        self.assertEqual(len(ctx.driver.devices), 2)
        self.assertEqual(ctx.device, ctx.driver.devices[0])
        self.assertEqual(ctx.datatype, np.dtype(np.float32))

    def test_explicit_arguments_override_config(self):
        driver = CpuDriver(2)
        ctx = ExecutionContext.create(
            config=KeyTensorConfig(),
            driver=driver,
            device=driver.devices[1],
            datatype="int32",
        )
        self.assertIs(ctx.driver, driver)
        self.assertEqual(ctx.device, driver.devices[1])
        self.assertEqual(ctx.datatype, np.dtype(np.int32))

    def test_derived_contexts(self):
        ctx = ExecutionContext.create(config=KeyTensorConfig(cpu_device_count=2))
        other = ctx.on_device(ctx.driver.devices[1])
        self.assertIs(other.driver, ctx.driver)
        self.assertEqual(other.device, ctx.driver.devices[1])
        self.assertEqual(ctx.with_datatype(np.float32).datatype, np.dtype(np.float32))
        self.assertEqual(ctx.datatype, np.dtype(np.float64))

    def test_wait_and_sync_return(self):
        ctx = ExecutionContext.create(config=KeyTensorConfig())
        ctx.wait()
        ctx.sync()


if __name__ == "__main__":
    unittest.main()
