"""Services package: statement parsing, PDF conversion, and statement file handling."""
