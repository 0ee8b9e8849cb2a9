"""
Unit tests for pair_swap/direction.py
"""

import unittest

from pair_swap.direction import Direction, Side, SwapDirectionController


class TestDirection(unittest.TestCase):
    def test_sides(self):
        self.assertIs(Direction.NATIVE_TO_TOKEN.input_side, Side.NATIVE)
        self.assertIs(Direction.NATIVE_TO_TOKEN.output_side, Side.TOKEN)
        self.assertIs(Direction.TOKEN_TO_NATIVE.input_side, Side.TOKEN)
        self.assertIs(Direction.TOKEN_TO_NATIVE.output_side, Side.NATIVE)

    def test_flipped(self):
        self.assertIs(Direction.NATIVE_TO_TOKEN.flipped(), Direction.TOKEN_TO_NATIVE)
        self.assertIs(Direction.TOKEN_TO_NATIVE.flipped(), Direction.NATIVE_TO_TOKEN)

    def test_from_side(self):
        self.assertIs(Direction.from_side("native"), Direction.NATIVE_TO_TOKEN)
        self.assertIs(Direction.from_side(Side.TOKEN), Direction.TOKEN_TO_NATIVE)


class TestSwapDirectionController(unittest.TestCase):
    def test_defaults(self):
        controller = SwapDirectionController()
        self.assertIs(controller.direction, Direction.NATIVE_TO_TOKEN)
        self.assertEqual(controller.snapshot(), (Direction.NATIVE_TO_TOKEN, "0", "0"))

    def test_only_active_side_is_editable(self):
        controller = SwapDirectionController()
        self.assertTrue(controller.is_editable(Side.NATIVE))
        self.assertFalse(controller.is_editable(Side.TOKEN))

        controller.toggle()
        self.assertTrue(controller.is_editable(Side.TOKEN))
        self.assertFalse(controller.is_editable(Side.NATIVE))

    def test_set_input_and_derived(self):
        controller = SwapDirectionController()
        controller.set_input("1.5")
        controller.set_derived("300")

        self.assertEqual(controller.native_value, "1.5")
        self.assertEqual(controller.token_value, "300")
        self.assertEqual(controller.input_value, "1.5")
        self.assertEqual(controller.derived_value, "300")

    def test_toggle_exchanges_values(self):
        controller = SwapDirectionController(native_value="1.5", token_value="300")

        direction = controller.toggle()

        self.assertIs(direction, Direction.TOKEN_TO_NATIVE)
        self.assertEqual(controller.native_value, "300")
        self.assertEqual(controller.token_value, "1.5")
        # The typed amount stays in the active field
        self.assertEqual(controller.input_value, "1.5")
        self.assertEqual(controller.derived_value, "300")

    def test_double_toggle_restores_state(self):
        controller = SwapDirectionController(native_value="1.5", token_value="300")
        before = controller.snapshot()

        controller.toggle()
        controller.toggle()

        self.assertEqual(controller.snapshot(), before)

    def test_reset_keeps_direction(self):
        controller = SwapDirectionController(
            Direction.TOKEN_TO_NATIVE, native_value="2", token_value="5"
        )
        controller.reset_values()
        self.assertEqual(controller.snapshot(), (Direction.TOKEN_TO_NATIVE, "0", "0"))


if __name__ == "__main__":
    unittest.main()
