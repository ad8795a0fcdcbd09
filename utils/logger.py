"""
Logger utility for the Round-Robin & Deadlock Simulator.

Provides step-by-step logging with verbosity levels.
"""

from typing import Iterable, Optional, Tuple
from datetime import datetime

from analysis.events import SimulationEvent


class SimulatorLogger:
    """
    Logger for simulation events and decisions.

    Format: "t=2: P2 dispatched to CPU (RR)" / "grant: R1 -> P2"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None, quiet: bool = False):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
            quiet: Suppress console output (file output is kept)
        """
        self.verbose = verbose
        self.quiet = quiet
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Simulation Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        # Console output
        if not self.quiet:
            print(formatted)

        # File output
        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_event(self, event: SimulationEvent, level: str = "info") -> None:
        """Log a simulation event using its event-log line."""
        self.log(str(event), level)

    def log_rejected(self, operation: str, reason: str) -> None:
        """
        Log an operation that left the state unchanged.

        Args:
            operation: Operation name (allocate, request, release, ...)
            reason: Why it was rejected
        """
        self.log(f"{operation} rejected - {reason}", "warning")

    def log_deadlock(self, deadlocked_pids: list, edges: Iterable[Tuple[str, str]] = ()) -> None:
        """
        Log deadlock detection result.

        Args:
            deadlocked_pids: Ids of deadlocked processes
            edges: Wait-for edges, shown in verbose mode
        """
        edges = list(edges)
        if edges:
            self.log("Wait-for edges: " + ", ".join(f"{u} -> {v}" for u, v in edges), "debug")
        if deadlocked_pids:
            pids_str = ", ".join(str(pid) for pid in deadlocked_pids)
            self.log(f"DEADLOCK DETECTED - Processes in deadlock: [{pids_str}]")
        else:
            self.log("No deadlock: wait-for graph is acyclic")

    def log_system_state(self, state_str: str) -> None:
        """
        Log state snapshot.

        Args:
            state_str: Formatted state
        """
        if self.verbose:
            self.log(f"State:\n{state_str}", "debug")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
