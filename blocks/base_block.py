from abc import ABC, abstractmethod

class BaseBlock(ABC):
    """
    Abstract base class for all pipeline blocks.

    A block is one clocked component: execute() is called once per tick.
    """

    @property
    @abstractmethod
    def block_name(self):
        """The user-facing name of the block."""
        pass


    @property
    @abstractmethod
    def params(self):
        """A dictionary defining the block's parameters, their types, and default values."""
        pass

    @property
    @abstractmethod
    def inputs(self):
        """A list of input port definitions."""
        pass

    @property
    @abstractmethod
    def outputs(self):
        """A list of output port definitions."""
        pass

    @abstractmethod
    def execute(self, time, inputs, params):
        """
        The core simulation function for the block.

        :param time: The current tick.
        :param inputs: A dictionary of input values, keyed by port index.
        :param params: A dictionary of the block's current parameter values.
        :return: A dictionary of output values, keyed by port index, plus 'E'.
        """
        pass

    @property
    def category(self):
        return "Other"

    @property
    def stateful(self):
        """
        Whether the block keeps state between ticks.

        Stateful blocks keep their registers in the params dict they are
        executed with, so one params dict is one block instance.

        :return: True for sequential blocks, False for combinational ones.
        """
        return False

    def default_params(self):
        """Build a fresh params dict from the declared defaults."""
        return {name: param.get("default") for name, param in self.params.items()}
