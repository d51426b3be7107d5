from .diffusion import implicit_euler_step, march, upwind_generator

__all__ = ["upwind_generator", "implicit_euler_step", "march"]
