# --------------------------------------------------------------
# File: Home.py
# Description: Formulario de Streamlit que solicita y muestra el saludo cifrado.
# --------------------------------------------------------------

import asyncio

import streamlit as st

from api.client import GreetingClient
from core import config
from core.errors import ConfigError, GreetingCryptoError
from core.log import configure_logging


async def fetch_greeting(public_pem: str, name: str) -> str:
    """Envía el nombre cifrado al servidor y devuelve el saludo descifrado.

    Args:
        public_pem (str): Clave pública PEM compartida con el servidor.
        name (str): Nombre introducido por el usuario.

    Returns:
        str: Saludo recuperado con la clave pública.
    """
    async with GreetingClient(public_pem, config.GREETING_API_URL) as client:
        return await client.send_encrypted_request(name)


configure_logging(config.LOG_LEVEL)

# Configura los metadatos de la página principal de la aplicación.
st.set_page_config(page_title="Encrypted Greeting", page_icon="🔐", layout="centered")

st.title("🔐 Encrypted Greeting App")
st.write("Introduce tu nombre para recibir un saludo cifrado desde el servidor.")

# Carga la clave pública una sola vez por ejecución del script.
try:
    public_pem = config.get_public_key_from_env()
except ConfigError as exc:
    st.error(f"Error: {exc}")
    st.stop()

with st.form("greeting_form"):
    name = st.text_input("Nombre", placeholder="Escribe tu nombre")
    submitted = st.form_submit_button("Enviar petición cifrada", use_container_width=True)

if submitted:
    if not name:
        st.error("Error: Please enter a name")
    else:
        with st.spinner("Procesando..."):
            try:
                greeting = asyncio.run(fetch_greeting(public_pem, name))
            except GreetingCryptoError as exc:
                st.error(f"Error: {exc}")
            else:
                st.success("✅ Respuesta descifrada:")
                st.markdown(f"### {greeting}")

# Resume el protocolo para el usuario final.
with st.expander("¿Cómo funciona?", expanded=True):
    st.markdown(
        "1. Tu nombre se cifra con la clave pública RSA (OAEP SHA-256).\n"
        "2. El dato cifrado se envía al servidor.\n"
        "3. El servidor lo descifra con la clave privada.\n"
        "4. El servidor crea el saludo y lo cifra con la clave privada.\n"
        "5. El cliente recupera el saludo con la clave pública."
    )
    st.info("🔒 La interfaz solo dispone de la clave pública: no puede descifrar mensajes dirigidos al servidor.")
