"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE
from chip8vm.errors import StackOverflowError, StackUnderflowError
from chip8vm.state import StackState


def push(stack: StackState, address: int) -> StackState:
    """Push a 16-bit return address onto the stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"stack overflow: {STACK_SIZE} nested calls already active")
    new_data = stack.data.at[stack.pointer].set(int(address) & 0xFFFF)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowError("stack underflow: return with no active call")
    new_pointer = stack.pointer - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
