"""Default JetBrains tools that are always advertised.

This is DATA, not code. The IDE may announce more tools, or newer
descriptions of these, through its own listing; see ``ToolRegistry``.
"""

from typing import Dict, List, Optional, Tuple

from ..models.tools import ToolDescriptor

# (property name, JSON type, description)
_Param = Tuple[str, str, str]


def _tool(
    name: str,
    description: str,
    params: Optional[List[_Param]] = None,
    required: Optional[List[str]] = None,
) -> ToolDescriptor:
    properties: Dict[str, Dict[str, str]] = {
        param: {"type": json_type, "description": text}
        for param, json_type, text in params or []
    }
    schema: Dict[str, object] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return ToolDescriptor(name=name, description=description, input_schema=schema)


_PATH_IN_PROJECT = "The path to the target file, relative to project root"

DEFAULT_TOOLS: Tuple[ToolDescriptor, ...] = (
    _tool(
        "create_new_file_with_text",
        "Creates a new file at the specified path within the project directory "
        "and populates it with the provided text",
        [
            ("pathInProject", "string", "The relative path where the file should be created"),
            ("text", "string", "The content to write into the new file"),
        ],
        ["pathInProject", "text"],
    ),
    _tool(
        "execute_action_by_id",
        "Executes an action by its ID in JetBrains IDE editor",
        [("actionId", "string", "The ID of the action to execute")],
        ["actionId"],
    ),
    _tool(
        "execute_terminal_command",
        "Executes a specified shell command in the IDE's integrated terminal",
        [("command", "string", "The shell command to execute")],
        ["command"],
    ),
    _tool(
        "find_commit_by_message",
        "Searches for a commit based on the provided text or keywords in the project history",
        [("query", "string", "The text or keywords to search for in commit messages")],
        ["query"],
    ),
    _tool(
        "find_files_by_name_substring",
        "Searches for all files in the project whose names contain the specified substring",
        [("nameSubstring", "string", "The substring to search for in file names")],
        ["nameSubstring"],
    ),
    _tool(
        "get_all_open_file_paths",
        "Lists full path relative paths to project root of all currently open files",
    ),
    _tool(
        "get_all_open_file_texts",
        "Returns text of all currently open files in the JetBrains IDE editor",
    ),
    _tool(
        "get_debugger_breakpoints",
        "Retrieves a list of all line breakpoints currently set in the project",
    ),
    _tool(
        "get_file_text_by_path",
        "Retrieves the text content of a file using its path relative to project root",
        [("pathInProject", "string", "The file location from project root")],
        ["pathInProject"],
    ),
    _tool(
        "get_open_in_editor_file_path",
        "Retrieves the absolute path of the currently active file",
    ),
    _tool(
        "get_open_in_editor_file_text",
        "Retrieves the complete text content of the currently active file",
    ),
    _tool(
        "get_progress_indicators",
        "Retrieves the status of all running progress indicators",
    ),
    _tool(
        "get_project_dependencies",
        "Get list of all dependencies defined in the project",
    ),
    _tool(
        "get_project_modules",
        "Get list of all modules in the project with their dependencies",
    ),
    _tool(
        "get_project_vcs_status",
        "Retrieves the current version control status of files in the project",
    ),
    _tool(
        "get_run_configurations",
        "Returns a list of run configurations for the current project",
    ),
    _tool(
        "get_selected_in_editor_text",
        "Retrieves the currently selected text from the active editor",
    ),
    _tool(
        "get_terminal_text",
        "Retrieves the current text content from the first active terminal",
    ),
    _tool(
        "list_available_actions",
        "Lists all available actions in JetBrains IDE editor",
    ),
    _tool(
        "list_directory_tree_in_folder",
        "Provides a hierarchical tree view of the project directory structure",
        [
            ("pathInProject", "string", "The starting folder path (use '/' for project root)"),
            ("maxDepth", "integer", "Maximum recursion depth (default: 5)"),
        ],
        ["pathInProject"],
    ),
    _tool(
        "list_files_in_folder",
        "Lists all files and directories in the specified project folder",
        [("pathInProject", "string", "The folder path (use '/' for project root)")],
        ["pathInProject"],
    ),
    _tool(
        "open_file_in_editor",
        "Opens the specified file in the JetBrains IDE editor",
        [("filePath", "string", "The path of file to open (can be absolute or relative)")],
        ["filePath"],
    ),
    _tool(
        "replace_current_file_text",
        "Replaces the entire content of the currently active file",
        [("text", "string", "The new content to write")],
        ["text"],
    ),
    _tool(
        "replace_file_text_by_path",
        "Replaces the entire content of a specified file with new text",
        [
            ("pathInProject", "string", _PATH_IN_PROJECT),
            ("text", "string", "The new content to write"),
        ],
        ["pathInProject", "text"],
    ),
    _tool(
        "replace_selected_text",
        "Replaces the currently selected text in the active editor",
        [("text", "string", "The replacement content")],
        ["text"],
    ),
    _tool(
        "replace_specific_text",
        "Replaces specific text occurrences in a file with new text",
        [
            ("pathInProject", "string", _PATH_IN_PROJECT),
            ("oldText", "string", "The text to be replaced"),
            ("newText", "string", "The replacement text"),
        ],
        ["pathInProject", "oldText", "newText"],
    ),
    _tool(
        "run_configuration",
        "Run a specific run configuration in the current project",
        [("name", "string", "The name of the run configuration to execute")],
        ["name"],
    ),
    _tool(
        "search_in_files_content",
        "Searches for a text substring within all files in the project",
        [("searchText", "string", "The text to find")],
        ["searchText"],
    ),
    _tool(
        "toggle_debugger_breakpoint",
        "Toggles a debugger breakpoint at the specified line in a project file",
        [
            ("filePathInProject", "string", "The relative path to the file within the project"),
            ("line", "integer", "The line number where to toggle the breakpoint (1-based)"),
        ],
        ["filePathInProject", "line"],
    ),
    _tool(
        "wait",
        "Waits for a specified number of milliseconds",
        [("milliseconds", "integer", "The duration to wait in milliseconds (default: 5000)")],
    ),
)


def get_default_tool(name: str) -> ToolDescriptor:
    """Get a default tool by name.

    Raises:
        KeyError: If no default tool has that name
    """
    for tool in DEFAULT_TOOLS:
        if tool.name == name:
            return tool
    raise KeyError(f"'{name}' is not a default tool")
