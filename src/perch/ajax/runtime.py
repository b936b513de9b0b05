"""Client runtime for ajax behaviors.

Behaviors render calls into this runtime rather than inline XHR code:

- ``Perch.Ajax.ajax(attrs)`` — binds a listener for ``attrs.e`` on the
  element ``attrs.c`` and calls ``attrs.u`` when it fires.
- ``Perch.Ajax.delegate(containerId, event, attrsById)`` — one listener
  on the container; the event target's closest element whose id is in
  ``attrsById`` decides which callback runs. Calling it again for the
  same container and event merges into the existing map.
- While a callback runs, the element named by ``attrs.i`` (if any) is
  un-hidden.
- ``Perch.Event.domReady(fn)`` — runs *fn* once the DOM is parsed.

The response of a callback is JSON (see ``AjaxResponse.to_json``):
component markup is swapped by id, then scripts are evaluated in order.

Rendered once per response as a ``JavaScriptHeaderItem`` with the
``RUNTIME_TOKEN`` token.
"""

RUNTIME_TOKEN = "perch-ajax-runtime"

RUNTIME_JS = """\
(function(){
  if(window.Perch&&window.Perch.Ajax)return;
  var Perch=window.Perch=window.Perch||{};
  Perch.Event={
    domReady:function(fn){
      if(document.readyState!=="loading"){fn();return;}
      document.addEventListener("DOMContentLoaded",fn);
    }
  };
  function apply(resp){
    var ids=Object.keys(resp.components||{});
    (resp.prepend||[]).forEach(function(js){new Function(js)();});
    ids.forEach(function(id){
      var el=document.getElementById(id);
      if(el){el.outerHTML=resp.components[id];}
    });
    (resp.scripts||[]).forEach(function(js){new Function(js)();});
  }
  function call(attrs,el){
    var url=attrs.u,body=null,params=new URLSearchParams();
    if(attrs.ep){Object.keys(attrs.ep).forEach(function(k){params.append(k,attrs.ep[k]);});}
    if(attrs.f&&el&&"value" in el){params.append(attrs.f,el.value);}
    var qs=params.toString();
    if(attrs.m==="POST"){body=params;}
    else if(qs){url+=(url.indexOf("?")<0?"?":"&")+qs;}
    var busy=attrs.i&&document.getElementById(attrs.i);
    if(busy)busy.hidden=false;
    return fetch(url,{method:attrs.m||"GET",body:body,headers:{"Perch-Ajax":"true"}})
      .then(function(r){return r.json();}).then(apply)
      .finally(function(){if(busy)busy.hidden=true;});
  }
  function handler(attrs,el){
    return function(e){
      if(attrs.pd)e.preventDefault();
      if(attrs.sp)e.stopPropagation();
      call(attrs,el||e.currentTarget);
    };
  }
  Perch.Ajax={
    ajax:function(attrs){
      var el=document.getElementById(attrs.c);
      if(!el)return;
      (attrs.e||[]).forEach(function(name){el.addEventListener(name,handler(attrs,el));});
    },
    delegate:function(containerId,eventName,attrsById){
      var root=document.getElementById(containerId);
      if(!root)return;
      var maps=root.__perchDelegates=root.__perchDelegates||{};
      if(maps[eventName]){Object.assign(maps[eventName],attrsById);return;}
      var map=maps[eventName]=Object.assign({},attrsById);
      root.addEventListener(eventName,function(e){
        var node=e.target;
        while(node&&node!==root){
          if(node.id&&map[node.id]){handler(map[node.id],node)(e);return;}
          node=node.parentNode;
        }
      });
    },
    process:apply
  };
})();
"""
