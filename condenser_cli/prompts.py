"""Prompt templates sent to text-generation providers."""

SUMMARY_INSTRUCTIONS = """This is a packed codebase file. Please analyze it and provide two summaries:
1. A comprehensive summary in Markdown format that explains:
   - The main purpose of the codebase
   - Key components and their relationships
   - Important functions and data structures
   - Overall architecture and design patterns
   - Any notable algorithms or techniques used

2. A structured summary in XML format, wrapped in a single <summary> root element, that includes:
   - <project> tag with name, purpose, and main languages
   - <components> section with individual <component> entries
   - <files> section highlighting key files and their purposes
   - <dependencies> section if dependencies are clear from the code
   - <recommendations> for potential improvements"""

CLASSIFIER_SYSTEM_PROMPT = "You are an expert software architect specializing in codebase organization."

CLASSIFICATION_PROMPT = """You are an expert software architect tasked with organizing a codebase into logical areas.

Below is the current configuration of areas in a software project:

{areas_json}

I've found the following files and directories that are not yet categorized:

{paths}

{samples}Please analyze these paths and categorize each one into the most appropriate existing area.
For each path, provide:
1. The recommended area name (must be one of the existing areas)
2. A confidence score from 0.0 to 1.0 (where 1.0 is absolute certainty)
3. Brief reasoning for your recommendation

Format your response as a JSON array of objects with these fields:
- path: the file or directory path
- category: the recommended area name
- confidence: your confidence score (0.0-1.0)
- reasoning: brief explanation for this categorization

Respond ONLY with valid JSON that I can parse programmatically."""

SAMPLES_HEADER = "Here's some sample content from a few of these files for context:\n\n"
