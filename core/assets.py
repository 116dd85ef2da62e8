# assets.py

import os

from core.query import SortOrder

# Get the path to where banner.txt lives
ASSETS_DIR = os.path.dirname(os.path.abspath(__file__))
BANNER_PATH = os.path.join(ASSETS_DIR, 'banner.txt')

BANNER = r"""
    ██╗   ██╗██╗██████╗ ███████╗    ██╗    ██╗██████╗ ██╗████████╗███████╗
    ██║   ██║██║██╔══██╗██╔════╝    ██║    ██║██╔══██╗██║╚══██╔══╝██╔════╝
    ██║   ██║██║██████╔╝█████╗      ██║ █╗ ██║██████╔╝██║   ██║   █████╗
    ╚██╗ ██╔╝██║██╔══██╗██╔══╝      ██║███╗██║██╔══██╗██║   ██║   ██╔══╝
     ╚████╔╝ ██║██████╔╝███████╗    ╚███╔███╔╝██║  ██║██║   ██║   ███████╗
      ╚═══╝  ╚═╝╚═════╝ ╚══════╝     ╚══╝╚══╝ ╚═╝  ╚═╝╚═╝   ╚═╝   ╚══════╝
                 WRITE, PREVIEW AND MODERATE FROM YOUR TERMINAL
"""


def get_banner():
    try:
        with open(BANNER_PATH, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError:
        return BANNER


CATEGORIES = [
    'Technology',
    'Development',
    'Design',
    'AI & Machine Learning',
    'DevOps',
    'Mobile',
    'Web',
    'Business',
    'Startup',
    'Career',
    'Tutorial',
    'Opinion',
    'News',
    'Review',
    'General',
]

SORT_LABELS = {
    "en": {
        SortOrder.NEWEST: "Newest First",
        SortOrder.OLDEST: "Oldest First",
        SortOrder.POPULAR: "Most Popular",
        SortOrder.TRENDING: "Trending",
    },
    "es": {
        SortOrder.NEWEST: "Más recientes",
        SortOrder.OLDEST: "Más antiguos",
        SortOrder.POPULAR: "Más populares",
        SortOrder.TRENDING: "Tendencia",
    },
}


def match_category(text):
    text = (text or '').strip().lower()
    if not text:
        return None
    for name in CATEGORIES:
        if name.lower() == text:
            return name
    return None


# Dictionary for multi-language Help
HELP_TEXT = {
    "en": """
╔══════════════════════════════════════════════════════════════════════╗
║  VIBE WRITE │ COMMAND REFERENCE MANUAL                               ║
╚══════════════════════════════════════════════════════════════════════╝

  ◆ NAVIGATION & INTERFACE
    ────────────────────────────────────────────────────────────────────
    [F1] or [:help]  › Toggle this Manual
    [S-TAB]          › Cycle focus (Title / Tags / Category / Body)
    [Ctrl+G]         › Jump to Command Bar
    [Ctrl+O]         › Open Blog Browser
    [F2]             › Toggle live preview pane
    [F3] [:preview]  › Full document preview
    [:eng] or [:spa] › Switch Language (English/Spanish)

  ◆ WRITING
    ────────────────────────────────────────────────────────────────────
    [:new]           › Clear screen for a fresh post
    [:restore]       › Recover the locally cached draft
    [:cat NAME]      › Set the post category
    [:tag / :untag]  › Add or remove a tag
    [:speed NN]      › Set reading speed (words per minute)
    [:add WORD]      › Add WORD to custom dictionary
    [Ctrl+D]         › Run Spellcheck / Dictionary Check
    [TAB]            › Indent two spaces (in the body)

  ◆ PUBLISHING & SAVING
    ────────────────────────────────────────────────────────────────────
    [Ctrl+S]         › Save as DRAFT (local copy + server)
    [Ctrl+P]         › SUBMIT for review
    [:login E P]     › Sign in    [:logout] › Sign out
    [:register U E F L P P] › Create an account

  ◆ FORMATTING (MARKDOWN)
    ────────────────────────────────────────────────────────────────────
    [Ctrl+B]         › **Bold**
    [Ctrl+K] [M-i]   › *Italic*
    [Ctrl+E]         › `Inline code`
    [Ctrl+L]         › - List item
    [Ctrl+Q]         › > Blockquote
    [:fmt NAME]      › h1 h2 h3 ul ol quote link image code

  ◆ BROWSER
    ────────────────────────────────────────────────────────────────────
    [:search TEXT]   › Search     [:filter-cat X] › Category filter
    [:filter-tag X]  › Tag filter [:sort S] › newest oldest popular trending
    [:clear]         › Clear filters   [:more] › Load next page
    [:trending N]    › Trending for 7, 14 or 30 days
    [:like N]        › Like row N  [:edit N] › Load row N into editor
    [:pending] [:manage STATUS] [:approve N] [:reject N WHY]
    [:hide N] [:delete N]  › Admin moderation
    [Enter]          › Read selected post   [F5] › Reload / retry

────────────────────────────────────────────────────────────────────────
 [Press F1 to Resume Writing]
""",
    "es": """
╔══════════════════════════════════════════════════════════════════════╗
║  VIBE WRITE │ MANUAL DE REFERENCIA                                   ║
╚══════════════════════════════════════════════════════════════════════╝

  ◆ NAVEGACIÓN E INTERFAZ
    ────────────────────────────────────────────────────────────────────
    [F1] o [:help]   › Activar este manual
    [S-TAB]          › Cambiar foco (Título / Etiquetas / Categoría / Cuerpo)
    [Ctrl+G]         › Ir a Barra de Comandos
    [Ctrl+O]         › Abrir Navegador de Blogs
    [F2]             › Vista previa lateral
    [F3] [:preview]  › Vista previa completa
    [:eng] o [:spa]  › Selecciona idioma (Inglés/Español)

  ◆ ESCRITURA
    ────────────────────────────────────────────────────────────────────
    [:new]           › Limpiar pantalla (Nueva entrada)
    [:restore]       › Recuperar el borrador local
    [:cat NOMBRE]    › Elegir categoría
    [:tag / :untag]  › Agregar o quitar etiqueta
    [:speed NN]      › Velocidad de lectura (palabras por minuto)
    [:add PALABRA]   › Agregar PALABRA al diccionario personalizado
    [Ctrl+D]         › Verificar Ortografía (Diccionario)
    [TAB]            › Sangría de dos espacios (en el cuerpo)

  ◆ PUBLICACIÓN Y GUARDADO
    ────────────────────────────────────────────────────────────────────
    [Ctrl+S]         › Guardar BORRADOR (copia local + servidor)
    [Ctrl+P]         › ENVIAR a revisión
    [:login E P]     › Iniciar sesión    [:logout] › Cerrar sesión
    [:register U E N A C C] › Crear una cuenta

  ◆ FORMATO (MARKDOWN)
    ────────────────────────────────────────────────────────────────────
    [Ctrl+B]         › **Negrita**
    [Ctrl+K] [M-i]   › *Cursiva*
    [Ctrl+E]         › `Código`
    [Ctrl+L]         › - Elemento de lista
    [Ctrl+Q]         › > Cita
    [:fmt NOMBRE]    › h1 h2 h3 ul ol quote link image code

  ◆ NAVEGADOR
    ────────────────────────────────────────────────────────────────────
    [:search TEXTO]  › Buscar     [:filter-cat X] › Filtrar categoría
    [:filter-tag X]  › Filtrar etiqueta [:sort S] › newest oldest popular trending
    [:clear]         › Quitar filtros   [:more] › Siguiente página
    [:trending N]    › Tendencias de 7, 14 o 30 días
    [:like N]        › Me gusta fila N  [:edit N] › Cargar fila N en el editor
    [:pending] [:manage ESTADO] [:approve N] [:reject N MOTIVO]
    [:hide N] [:delete N]  › Moderación
    [Enter]          › Leer entrada   [F5] › Recargar / reintentar
────────────────────────────────────────────────────────────────────────
 [Presiona F1 para volver a escribir]
"""
}

# Version info

VERSION = "1.0.0"

# Dictionary for UI labels
TRANSLATIONS = {
    "en": {
        "ui": {
            "title": "Title: ",
            "tags": "Tags: ",
            "category": "Category: ",
            "command": "Enter Command: ",
            "search": "Search: ",
            "new_post": "[NEW]",
            "lang_feedback": "Language: ENGLISH",
            "header": " VIBE WRITE | MARKDOWN EDITOR",
            "warning_prompt": "POST UNSAVED! Proceed? (y/n): ",
            "browser_title": "  BLOG BROWSER",
            "trending_title": "  TRENDING · LAST {days} DAYS",
            "pending_title": "  PENDING REVIEW",
            "manage_title": "  MANAGE BLOGS ({status})",
            "fetching": "Fetching blogs...",
            "browser_hint": "ENTER to read, :more for next page, Control+O to exit.",
            "browser_empty": "No blogs found.",
            "browser_error": "Failed to load blogs. Press F5 to try again.",
            "discover": "{total} articles · {filters} active filters · sort: {sort}",
            "offline": "⚠️ OFFLINE MODE: API unreachable.",
            "save_fail": "SAVE FAILED: Offline or signed out",
            "load_error": "Load Error",
            "empty_doc": "Empty document",
            "ready": "Ready ({lang})",
            "recovery_found": "DRAFT CACHE FOUND! Type :restore",
            "restored": "Draft restored.",
            "no_errors": "✅ No errors ({lang})",
            "errors_found": "❌ {count} errors: {list}...",
            "saved": "Draft saved successfully!",
            "submitted": "Blog submitted for review successfully!",
            "save_error": "Save Error: {error}",
            "status_draft": "DRAFT",
            "status_pending": "PENDING REVIEW",
            "speed_set": "Reading speed: {speed} wpm",
            "help_btn": "Help",
            "added_to_dict": "Added to dictionary.",
            "unknown_command": "Unknown command: {cmd}",
            "bad_row": "No row {row} in the current list",
            "login_required": "Please log in first",
            "admin_required": "Admin role required",
            "signed_out": "signed out",
            "category_unknown": "Unknown category: {name}",
            "pending_only": "Approve and reject work on the :pending list",
            "delete_prompt": "Type DELETE to remove this post: ",
            "register_usage": "Usage: :register USER EMAIL FIRST LAST PASSWORD CONFIRM",
            "preview_title": " PREVIEW (F3 to close) ",
        },
        "status": {
            "words": "Words",
            "read": "min Read",
            "chars": "chars",
            "status": "STATUS",
        }
    },
    "es": {
        "ui": {
            "title": "Título: ",
            "tags": "Etiquetas: ",
            "category": "Categoría: ",
            "command": "Introduce Comando: ",
            "search": "Buscar: ",
            "new_post": "[NUEVO]",
            "lang_feedback": "Idioma: ESPAÑOL",
            "header": " VIBE WRITE | EDITOR MARKDOWN",
            "warning_prompt": "¡POST SIN GUARDAR! ¿Continuar? (y/n): ",
            "browser_title": "  NAVEGADOR DE BLOGS",
            "trending_title": "  TENDENCIAS · ÚLTIMOS {days} DÍAS",
            "pending_title": "  PENDIENTES DE REVISIÓN",
            "manage_title": "  GESTIONAR BLOGS ({status})",
            "fetching": "Buscando blogs...",
            "browser_hint": "ENTER para leer, :more siguiente página, Control+O para salir.",
            "browser_empty": "No se encontraron blogs.",
            "browser_error": "Error al cargar blogs. Pulsa F5 para reintentar.",
            "discover": "{total} artículos · {filters} filtros activos · orden: {sort}",
            "offline": "⚠️ MODO OFFLINE: API inaccesible.",
            "save_fail": "ERROR AL GUARDAR: Sin conexión o sin sesión",
            "load_error": "Error de carga",
            "empty_doc": "Documento vacío",
            "ready": "Listo ({lang})",
            "recovery_found": "¡BORRADOR LOCAL ENCONTRADO! Escribe :restore",
            "restored": "Borrador recuperado.",
            "no_errors": "✅ Sin errores ({lang})",
            "errors_found": "❌ {count} errores: {list}...",
            "saved": "¡Borrador guardado!",
            "submitted": "¡Blog enviado a revisión!",
            "save_error": "Error al guardar: {error}",
            "status_draft": "BORRADOR",
            "status_pending": "EN REVISIÓN",
            "speed_set": "Velocidad de lectura: {speed} ppm",
            "help_btn": "Ayuda",
            "added_to_dict": "añadida al diccionario.",
            "unknown_command": "Comando desconocido: {cmd}",
            "bad_row": "No existe la fila {row}",
            "login_required": "Inicia sesión primero",
            "admin_required": "Se requiere rol de administrador",
            "signed_out": "sin sesión",
            "category_unknown": "Categoría desconocida: {name}",
            "pending_only": "Aprobar y rechazar solo funciona en la lista :pending",
            "delete_prompt": "Escribe DELETE para borrar esta entrada: ",
            "register_usage": "Uso: :register USUARIO EMAIL NOMBRE APELLIDO CLAVE CONFIRMAR",
            "preview_title": " VISTA PREVIA (F3 para cerrar) ",
        },
        "status": {
            "words": "Palabras",
            "read": "Min Lectura",
            "chars": "caracteres",
            "status": "ESTADO",
        }
    }
}
