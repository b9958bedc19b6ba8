"""
Plugin: Ficha de contacto CRM

Vista de detalle de contacto definida por tres documentos YAML:

- layout.yaml: secciones y su colocación en columna principal y lateral
- contact_fields.yaml: carpetas plegables con las definiciones de campo
- contact_data.yaml: registro del contacto, actividades y notas
"""
